"""Zikir Rewards - gamification accrual service for zikir counting rooms"""

__version__ = "1.0.0"
