from src.inside_notes.domain.models.notification import NotificationType
from src.inside_notes.services.notifications.service import NotificationCenter


def test_notifications_are_dismissed_after_ttl():
    now = [100.0]
    center = NotificationCenter(ttl_seconds=5, clock=lambda: now[0])

    center.success("Anotação salva como final.")
    now[0] = 103.0
    center.error("Falha ao refinar texto com IA.")

    assert [n.type for n in center.active()] == [NotificationType.SUCCESS, NotificationType.ERROR]

    now[0] = 105.0
    assert [n.message for n in center.active()] == ["Falha ao refinar texto com IA."]

    now[0] = 108.0
    assert center.active() == []
