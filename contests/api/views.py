"""
Contest Tracker API Views

REST API endpoints for the contest feed and user features.

This module provides endpoints for:
- The combined upcoming/past contest feed (refreshes stale data on read)
- Triggering a background refresh and listing the configured sources
- Per-user bookmarks
- Admin-set solution video links

The feed and source list are public; bookmarks need a logged-in user;
refresh and solution links need a staff user.
"""

import logging

from django.conf import settings
from django.db import IntegrityError
from django.db.models import Max
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from contests.api.serializers import (
    BookmarkCreateSerializer,
    BookmarkSerializer,
    ContestSerializer,
    SolutionLinkSerializer,
)
from contests.api.throttling import FeedThrottle, RefreshTriggerThrottle
from contests.models import Bookmark, Contest, Platform

logger = logging.getLogger(__name__)

# Source metadata
SOURCE_METADATA = {
    'codeforces': {
        'name': 'Codeforces',
        'url': 'https://codeforces.com',
        'platform': Platform.CODEFORCES,
    },
    'codechef': {
        'name': 'CodeChef',
        'url': 'https://www.codechef.com',
        'platform': Platform.CODECHEF,
    },
    'leetcode': {
        'name': 'LeetCode',
        'url': 'https://leetcode.com',
        'platform': Platform.LEETCODE,
    },
    'past_contests': {
        'name': 'Past contest aggregator',
        'url': None,
        'platform': None,
    },
}


def _get_aggregator():
    """Get ContestAggregator instance (lazy import keeps settings reads at call time)."""
    from contests.services.aggregator import ContestAggregator
    return ContestAggregator()


SERVER_ERROR = {'message': 'Server error'}


# ============================================================
# Contest Endpoints
# ============================================================

@extend_schema(
    tags=['Contests'],
    summary='Get contest feed',
    description='''
    Upcoming and recent past contests from every configured platform.

    Stored contests are refreshed from the sources first when the last
    refresh is older than the staleness window (one hour by default).
    Past contests carry a solution_link when a solution video matched.
    ''',
    responses={
        200: {
            'description': 'Contest feed',
            'content': {
                'application/json': {
                    'example': {
                        'upcoming': [{
                            'id': 1,
                            'name': 'Codeforces Round 1000 (Div. 2)',
                            'platform': 'Codeforces',
                            'date': '2025-12-07T14:35:00Z',
                            'end_time': '2025-12-07T16:35:00Z',
                            'link': 'https://codeforces.com/contest/2063',
                            'solution_link': None,
                            'status': 'upcoming',
                        }],
                        'past': [],
                    }
                }
            }
        },
        500: {'description': 'Server error'},
    },
)
@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([FeedThrottle])
def contest_feed(request):
    """
    Return upcoming contests (soonest first) and past contests (latest first).

    Source outages only shrink the feed. Anything else, a database outage
    in particular, returns a generic 500.
    """
    try:
        feed = _get_aggregator().get_contests()
    except Exception as e:
        logger.exception(f"Contest feed failed: {e}")
        return Response(SERVER_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'upcoming': ContestSerializer(feed.upcoming, many=True).data,
        'past': ContestSerializer(feed.past, many=True).data,
    })


@extend_schema(
    tags=['Contests'],
    summary='Trigger contest refresh',
    description='Queue a background refresh of every source, ignoring the staleness window.',
    request=None,
    responses={
        202: {
            'description': 'Refresh queued',
            'content': {
                'application/json': {
                    'example': {
                        'success': True,
                        'task_id': '5f1c3c1e-8d0b-4c1e-9a53-2a1f1f0b6d11',
                        'status': 'queued',
                    }
                }
            }
        },
        403: {'description': 'Staff user required'},
    },
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
@throttle_classes([RefreshTriggerThrottle])
def trigger_refresh(request):
    """Queue contests.tasks.refresh_contests with force=True."""
    from contests.tasks import refresh_contests

    task = refresh_contests.delay(force=True)
    logger.info(f"Contest refresh queued by {request.user} (task {task.id})")

    return Response({
        'success': True,
        'task_id': task.id,
        'status': 'queued',
    }, status=status.HTTP_202_ACCEPTED)


@extend_schema(
    tags=['Contests'],
    summary='List contest sources',
    description='List the contest sources with whether each is enabled and its last refresh.',
)
@api_view(['GET'])
@permission_classes([AllowAny])
def list_sources(request):
    """
    List known contest sources.

    A source is enabled when it is named in CONTESTS_SOURCES. The scraper
    additionally needs PAST_CONTESTS_URL.
    """
    configured = set(getattr(settings, 'CONTESTS_SOURCES', []))
    past_contests_url = getattr(settings, 'PAST_CONTESTS_URL', '')

    sources = []
    for source_id, metadata in SOURCE_METADATA.items():
        enabled = source_id in configured
        url = metadata['url']
        if source_id == 'past_contests':
            enabled = enabled and bool(past_contests_url)
            url = past_contests_url or None

        last_updated = None
        if metadata['platform']:
            latest = Contest.objects.filter(
                platform=metadata['platform'],
            ).aggregate(latest=Max('updated_at'))['latest']
            last_updated = latest.isoformat() if latest else None

        sources.append({
            'id': source_id,
            'name': metadata['name'],
            'url': url,
            'platform': metadata['platform'],
            'enabled': enabled,
            'last_updated': last_updated,
        })

    return Response({'sources': sources})


# ============================================================
# Bookmark Endpoints
# ============================================================

@extend_schema(
    tags=['Bookmarks'],
    summary='List or create bookmarks',
    description='''
    GET returns the current user's bookmarks with the contest nested.

    POST bookmarks a contest: {"contest_id": 42}
    ''',
    request=BookmarkCreateSerializer,
    responses={
        200: BookmarkSerializer(many=True),
        201: BookmarkSerializer,
        400: {'description': 'Missing contest_id or contest already bookmarked'},
        404: {'description': 'Contest not found'},
    },
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def bookmarks(request):
    """List the user's bookmarks, or add one."""
    if request.method == 'GET':
        queryset = Bookmark.objects.filter(user=request.user).select_related('contest')
        return Response(BookmarkSerializer(queryset, many=True).data)

    serializer = BookmarkCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'message': 'contest_id is required', 'errors': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    contest_id = serializer.validated_data['contest_id']
    try:
        contest = Contest.objects.get(pk=contest_id)
    except Contest.DoesNotExist:
        return Response(
            {'message': 'Contest not found'},
            status=status.HTTP_404_NOT_FOUND
        )

    if Bookmark.objects.filter(user=request.user, contest=contest).exists():
        return Response(
            {'message': 'Contest already bookmarked'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        bookmark = Bookmark.objects.create(user=request.user, contest=contest)
    except IntegrityError:
        # Lost a race with a concurrent request for the same pair
        return Response(
            {'message': 'Contest already bookmarked'},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response(BookmarkSerializer(bookmark).data, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=['Bookmarks'],
    summary='Remove a bookmark',
    parameters=[
        OpenApiParameter(
            name='bookmark_id',
            type=int,
            location=OpenApiParameter.PATH,
            description='Bookmark ID',
        ),
    ],
    responses={
        200: {'description': 'Bookmark removed'},
        404: {'description': "Bookmark not found (or not the user's)"},
    },
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_bookmark(request, bookmark_id):
    """Delete one of the current user's bookmarks."""
    deleted, _ = Bookmark.objects.filter(pk=bookmark_id, user=request.user).delete()
    if not deleted:
        return Response(
            {'message': 'Bookmark not found'},
            status=status.HTTP_404_NOT_FOUND
        )

    return Response({'message': 'Bookmark removed'})


# ============================================================
# Solution Endpoints
# ============================================================

@extend_schema(
    tags=['Solutions'],
    summary='Set a solution video link',
    description='''
    Attach a solution video to a contest. Links set here are stored and
    are never replaced by automatic matching or by refreshes.
    ''',
    request=SolutionLinkSerializer,
    responses={
        200: ContestSerializer,
        400: {'description': 'Invalid contest_id or video_url'},
        404: {'description': 'Contest not found'},
    },
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def add_solution(request):
    """Store a solution_link on a contest."""
    serializer = SolutionLinkSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'message': 'contest_id and a valid video_url are required', 'errors': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        contest = Contest.objects.get(pk=serializer.validated_data['contest_id'])
    except Contest.DoesNotExist:
        return Response(
            {'message': 'Contest not found'},
            status=status.HTTP_404_NOT_FOUND
        )

    contest.solution_link = serializer.validated_data['video_url']
    contest.save(update_fields=['solution_link'])
    logger.info(f"Solution link set for {contest} by {request.user}")

    return Response(ContestSerializer(contest).data)
