from .comment_parser import CommentParser

__all__ = ['CommentParser']
