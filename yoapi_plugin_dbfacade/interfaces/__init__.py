"""
接口模块初始化文件
导出内部公共API接口
"""

from .internal_api import DatabaseInternalAPI

__all__ = ['DatabaseInternalAPI']
