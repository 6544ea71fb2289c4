# lms_chat/services/realtime/__init__.py
from .channel_manager import ChannelManager, chat_channel, user_channel
from .relay import RealtimeRelay

__all__ = ["ChannelManager", "RealtimeRelay", "chat_channel", "user_channel"]
