"""
服务模块 - SQL语句构建
"""

from .crud import QueryAction, perform, render_value, validate_identifier

__all__ = ['QueryAction', 'perform', 'render_value', 'validate_identifier']
