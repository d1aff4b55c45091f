"""
Featureboard – SQLAlchemy ORM models package.

Imports all model classes so the metadata and the app can discover them
through a single ``from featureboard.models import *`` import.
"""

from featureboard.models.user import GlobalRole, User                        # noqa: F401
from featureboard.models.board import Board                                  # noqa: F401
from featureboard.models.board_membership import BoardMembership, BoardRole  # noqa: F401
from featureboard.models.category import Category                            # noqa: F401
from featureboard.models.feedback import Feedback, FeedbackStatus            # noqa: F401
from featureboard.models.vote import Vote, VoteType                          # noqa: F401
from featureboard.models.comment import Comment, CommentReply                # noqa: F401
from featureboard.models.reaction import CommentReaction                     # noqa: F401
