"""
Serializers for the contest API.
"""

from rest_framework import serializers

from contests.models import Bookmark, Contest


class ContestSerializer(serializers.ModelSerializer):
    class Meta:
        model = Contest
        fields = [
            'id',
            'name',
            'platform',
            'date',
            'end_time',
            'link',
            'solution_link',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BookmarkSerializer(serializers.ModelSerializer):
    """Bookmark with its contest nested."""

    contest = ContestSerializer(read_only=True)

    class Meta:
        model = Bookmark
        fields = ['id', 'contest', 'created_at']
        read_only_fields = fields


class BookmarkCreateSerializer(serializers.Serializer):
    contest_id = serializers.IntegerField(min_value=1)


class SolutionLinkSerializer(serializers.Serializer):
    contest_id = serializers.IntegerField(min_value=1)
    video_url = serializers.URLField(max_length=500)
