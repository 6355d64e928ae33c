from booking_speed.models.class_snapshot import ClassSnapshot

__all__ = [
    "ClassSnapshot",
]
