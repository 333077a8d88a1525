"""
核心模块 - 数据库连接和后端实现
提供单连接管理以及 MySQL、MongoDB 两种后端
"""

from .base import BackendType, DatabaseBackend
from .connection import DatabaseConnectionManager, BACKENDS
from .mongo import MongoBackend
from .mysql import MySQLBackend

__all__ = [
    'BackendType',
    'DatabaseBackend',
    'DatabaseConnectionManager',
    'BACKENDS',
    'MongoBackend',
    'MySQLBackend'
]
