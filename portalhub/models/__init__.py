"""Convenience exports for ORM models."""
from .collection import Collection, CollectionItem
from .follow import Follow
from .group import Group, GroupMember, GroupMessage
from .post import Bookmark, Comment, Post, PostLike, Reaction
from .profile import Profile
from .project import Project, ProjectDownload, ProjectFile, ProjectStar
from .story import Story
from .user import User

__all__ = [
    "Bookmark",
    "Collection",
    "CollectionItem",
    "Comment",
    "Follow",
    "Group",
    "GroupMember",
    "GroupMessage",
    "Post",
    "PostLike",
    "Profile",
    "Project",
    "ProjectDownload",
    "ProjectFile",
    "ProjectStar",
    "Reaction",
    "Story",
    "User",
]
