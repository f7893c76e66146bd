from fieldservice.scheduling.availability import (
    parse_slot_label,
    resolve_slots,
    slot_instants,
    weekday_index,
)

__all__ = ["resolve_slots", "weekday_index", "slot_instants", "parse_slot_label"]
