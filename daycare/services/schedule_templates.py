import structlog

from daycare.services.kv_store import KeyValueStore, fixed_schedule_key
from daycare.services.schedule import ScheduleEditor

logger = structlog.get_logger()


async def load_template(store: KeyValueStore, class_id: int) -> list[dict]:
    saved = await store.get(fixed_schedule_key(class_id))
    if not isinstance(saved, list):
        return []
    return [entry for entry in saved if isinstance(entry, dict)]


async def initial_schedule(store: KeyValueStore, class_id: int) -> ScheduleEditor:
    """Default day for a class, with its saved fixed rows applied."""
    return ScheduleEditor.from_template(await load_template(store, class_id))


async def snapshot_fixed_rows(
    store: KeyValueStore, class_id: int, editor: ScheduleEditor
) -> list[dict]:
    """Remember the fixed rows of a saved day as the class's template.

    Nothing is written when the day has no fixed rows, so a free-form day
    does not wipe the template.
    """
    snapshot = editor.fixed_snapshot()
    if snapshot:
        await store.set(fixed_schedule_key(class_id), snapshot)
        logger.info("Schedule template updated", class_id=class_id, rows=len(snapshot))
    return snapshot
