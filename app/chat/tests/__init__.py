"""
Tests for chat app.

This package contains test modules for:
- test_status_sync.py: ChatStatusSync and chat model constraint tests
- test_messaging.py: ChatMessaging tests
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_status_sync.py
"""
