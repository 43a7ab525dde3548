"""Convenience exports for schema layer."""
from .auth import (
    AccountResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordUpdateRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from .collections import (
    CollectionCreate,
    CollectionItemCreate,
    CollectionItemListResponse,
    CollectionItemResponse,
    CollectionListResponse,
    CollectionResponse,
)
from .feeds import (
    ActivityFeedResponse,
    ActivityItem,
    ActivityPostPreview,
    ExploreResponse,
    HashtagCount,
    SearchResponse,
    TrendingHashtagsResponse,
)
from .follow import FollowEdgeResponse, FollowListResponse, FollowResponse, FollowStatusResponse
from .groups import (
    GroupCreate,
    GroupListResponse,
    GroupMemberListResponse,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    RoleChangeRequest,
)
from .notifications import NotificationSummaryResponse
from .posts import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    EditHistoryEntry,
    MediaMetadata,
    PostCreate,
    PostFeedResponse,
    PostResponse,
    PostUpdate,
    ReactionListResponse,
    ReactionResponse,
    ReactionToggleRequest,
    ToggleResponse,
)
from .profiles import (
    OwnProfileResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileSetupRequest,
    ProfileSummary,
    ProfileUpdateRequest,
)
from .projects import (
    ProjectCreate,
    ProjectFileListResponse,
    ProjectFileResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
    Technology,
    TechnologyListResponse,
)
from .stories import StoryCreate, StoryListResponse, StoryResponse
from .uploads import UploadListResponse, UploadResponse

__all__ = [
    "AccountResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "PasswordUpdateRequest",
    "SignInRequest",
    "SignUpRequest",
    "TokenResponse",
    "CollectionCreate",
    "CollectionItemCreate",
    "CollectionItemListResponse",
    "CollectionItemResponse",
    "CollectionListResponse",
    "CollectionResponse",
    "ActivityFeedResponse",
    "ActivityItem",
    "ActivityPostPreview",
    "ExploreResponse",
    "HashtagCount",
    "SearchResponse",
    "TrendingHashtagsResponse",
    "FollowEdgeResponse",
    "FollowListResponse",
    "FollowResponse",
    "FollowStatusResponse",
    "GroupCreate",
    "GroupListResponse",
    "GroupMemberListResponse",
    "GroupMemberResponse",
    "GroupResponse",
    "GroupUpdate",
    "MessageCreate",
    "MessageListResponse",
    "MessageResponse",
    "RoleChangeRequest",
    "NotificationSummaryResponse",
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "EditHistoryEntry",
    "MediaMetadata",
    "PostCreate",
    "PostFeedResponse",
    "PostResponse",
    "PostUpdate",
    "ReactionListResponse",
    "ReactionResponse",
    "ReactionToggleRequest",
    "ToggleResponse",
    "OwnProfileResponse",
    "ProfileListResponse",
    "ProfileResponse",
    "ProfileSetupRequest",
    "ProfileSummary",
    "ProfileUpdateRequest",
    "ProjectCreate",
    "ProjectFileListResponse",
    "ProjectFileResponse",
    "ProjectListResponse",
    "ProjectResponse",
    "ProjectUpdate",
    "Technology",
    "TechnologyListResponse",
    "StoryCreate",
    "StoryListResponse",
    "StoryResponse",
    "UploadListResponse",
    "UploadResponse",
]
