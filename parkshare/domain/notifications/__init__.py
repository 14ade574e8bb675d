"""Notifications domain - in-app notification sink and inbox"""
