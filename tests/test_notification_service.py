"""Tests for transient in-app notifications"""
from bjjfed.services import NotificationService


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_notifications_expire_after_ttl():
    clock = FakeClock()
    service = NotificationService(ttl_seconds=8, clock=clock)
    service.notify('Audit complete', 'ok', 'system')

    clock.now += 7.9
    assert len(service.active()) == 1

    clock.now += 0.2
    assert service.active() == []


def test_dismiss_notification():
    service = NotificationService()
    first = service.notify('One', 'first')
    service.notify('Two', 'second', 'alert')

    assert service.dismiss(first.id) is True
    assert service.dismiss(first.id) is False
    assert [n.title for n in service.active()] == ['Two']


def test_unknown_type_defaults_to_system():
    service = NotificationService()
    assert service.notify('Title', 'msg', 'fireworks').type == 'system'
