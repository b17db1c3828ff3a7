"""
Unit Tests for the toast notification center.
"""

from modules.scheduling.services.notifications import NotificationCenter, NotificationType


def test_new_notification_replaces_current():
    center = NotificationCenter()

    center.success("Teacher assigned successfully!")
    latest = center.error("Failed to assign teacher")

    assert center.current is latest
    assert latest.type is NotificationType.ERROR
    assert [n.message for n in center.history] == [
        "Teacher assigned successfully!",
        "Failed to assign teacher",
    ]


def test_dismiss_keeps_history():
    center = NotificationCenter()
    center.success("done")

    center.dismiss()

    assert center.current is None
    assert len(center.history) == 1


def test_history_is_bounded():
    center = NotificationCenter(history_size=3)
    for i in range(5):
        center.success(f"message {i}")

    assert [n.message for n in center.history] == ["message 2", "message 3", "message 4"]
