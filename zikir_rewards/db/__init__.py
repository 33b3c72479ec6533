"""Persistence for player progress"""
