from booking_speed.services.snapshot_service import insert_snapshots, latest_snapshots, load_snapshots, snapshot_count

__all__ = ["insert_snapshots", "latest_snapshots", "load_snapshots", "snapshot_count"]
