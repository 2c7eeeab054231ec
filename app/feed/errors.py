# app/feed/errors.py
"""
Errores "de forma" que el store levanta aunque la DB no haya fallado.
Los errores remotos (SQLAlchemyError) se propagan tal cual.
"""


class FeedStoreError(Exception):
    pass


class StorageError(FeedStoreError):
    pass


class ImageUploadError(FeedStoreError):
    pass


class LikeError(FeedStoreError):
    pass


class CommentError(FeedStoreError):
    pass


class CommentNotFoundError(CommentError):
    pass
