"""Data room use cases."""

from dataroom.application.use_cases.data_rooms.data_room_service import DataRoomService

__all__ = ["DataRoomService"]
