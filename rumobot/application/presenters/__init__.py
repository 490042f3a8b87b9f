from .chat_presenter import ChatPresenter

__all__ = ["ChatPresenter"]
