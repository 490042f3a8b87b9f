from .session import MineflayerSession, MineflayerSessionFactory

__all__ = ["MineflayerSession", "MineflayerSessionFactory"]
