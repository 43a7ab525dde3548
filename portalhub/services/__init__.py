"""Convenience exports for service layer."""
from .auth_service import (
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    request_password_reset,
    reset_password,
    resolve_websocket_user,
    sign_in,
    sign_up,
    update_password,
)
from .collection_service import (
    add_to_collection,
    create_collection,
    delete_collection,
    list_collection_items,
    list_collections,
    remove_from_collection,
)
from .comment_service import create_comment, list_comments
from .engagement_service import (
    check_bookmark,
    check_like,
    list_bookmarks,
    list_reactions,
    toggle_bookmark,
    toggle_like,
    toggle_reaction,
)
from .feed_service import (
    activity_feed,
    following_feed,
    home_feed,
    latest_posts,
    posts_by_hashtag,
    posts_by_mention,
    profile_posts,
    search,
    trending_hashtags,
    trending_posts,
)
from .follow_service import (
    accept_follow_request,
    follow_user,
    get_follow_status,
    get_followers,
    get_following,
    get_pending_request,
    get_pending_requests,
    reject_follow_request,
    unfollow_user,
)
from .group_service import (
    can_read_group,
    change_role,
    create_group,
    delete_group,
    get_group,
    get_group_members,
    get_groups,
    get_message,
    get_messages,
    get_my_groups,
    get_public_groups,
    join_group,
    leave_group,
    remove_member,
    send_message,
    update_group,
)
from .hydration import serialize_post, serialize_posts
from .migrations import run_migrations_if_needed
from .post_service import create_post, delete_post, edit_post, extract_hashtags, extract_mentions, get_post
from .profile_service import (
    get_profile,
    get_profile_by_username,
    search_profiles,
    setup_profile,
    suggest_profiles,
    update_profile,
)
from .project_service import (
    check_star,
    create_project,
    delete_project,
    delete_project_file,
    fork_project,
    get_project,
    list_project_files,
    list_projects,
    list_technologies,
    record_download,
    serialize_projects,
    toggle_star,
    update_project,
    upload_project_file,
    upload_project_image,
)
from .realtime import ChangeFeed, Subscription, change_feed
from .storage_service import (
    StorageConfigurationError,
    StorageUploadError,
    storage_errors,
    upload_file,
    upload_files,
)
from .story_service import create_story, list_stories, share_post_to_story

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "request_password_reset",
    "reset_password",
    "resolve_websocket_user",
    "sign_in",
    "sign_up",
    "update_password",
    "add_to_collection",
    "create_collection",
    "delete_collection",
    "list_collection_items",
    "list_collections",
    "remove_from_collection",
    "create_comment",
    "list_comments",
    "check_bookmark",
    "check_like",
    "list_bookmarks",
    "list_reactions",
    "toggle_bookmark",
    "toggle_like",
    "toggle_reaction",
    "activity_feed",
    "following_feed",
    "home_feed",
    "latest_posts",
    "posts_by_hashtag",
    "posts_by_mention",
    "profile_posts",
    "search",
    "trending_hashtags",
    "trending_posts",
    "accept_follow_request",
    "follow_user",
    "get_follow_status",
    "get_followers",
    "get_following",
    "get_pending_request",
    "get_pending_requests",
    "reject_follow_request",
    "unfollow_user",
    "can_read_group",
    "change_role",
    "create_group",
    "delete_group",
    "get_group",
    "get_group_members",
    "get_groups",
    "get_message",
    "get_messages",
    "get_my_groups",
    "get_public_groups",
    "join_group",
    "leave_group",
    "remove_member",
    "send_message",
    "update_group",
    "serialize_post",
    "serialize_posts",
    "run_migrations_if_needed",
    "create_post",
    "delete_post",
    "edit_post",
    "extract_hashtags",
    "extract_mentions",
    "get_post",
    "get_profile",
    "get_profile_by_username",
    "search_profiles",
    "setup_profile",
    "suggest_profiles",
    "update_profile",
    "check_star",
    "create_project",
    "delete_project",
    "delete_project_file",
    "fork_project",
    "get_project",
    "list_project_files",
    "list_projects",
    "list_technologies",
    "record_download",
    "serialize_projects",
    "toggle_star",
    "update_project",
    "upload_project_file",
    "upload_project_image",
    "ChangeFeed",
    "Subscription",
    "change_feed",
    "StorageConfigurationError",
    "StorageUploadError",
    "storage_errors",
    "upload_file",
    "upload_files",
    "create_story",
    "list_stories",
    "share_post_to_story",
]
