"""Gamification data models"""
