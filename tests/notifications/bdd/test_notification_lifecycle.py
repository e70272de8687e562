"""BDD tests for the notification lifecycle."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/notification_lifecycle.feature")


def _attempt(notification, error, action, *args):
    try:
        action(*args)
    except ValidationError as exc:
        error["exc"] = exc
    return notification


@when("the notification is sent", target_fixture="notification")
def send(notification, error):
    return _attempt(notification, error, notification.mark_sent)


@when(parsers.cfparse('delivery fails with "{reason}"'), target_fixture="notification")
def delivery_fails(notification, reason, error):
    return _attempt(notification, error, notification.mark_failed, reason)


@when("the notification is retried", target_fixture="notification")
def retry(notification, error):
    return _attempt(notification, error, notification.retry)


@when(parsers.cfparse('the notification is cancelled because "{reason}"'), target_fixture="notification")
def cancel(notification, reason, error):
    return _attempt(notification, error, notification.cancel, reason)


@when("the notification is dismissed", target_fixture="notification")
def dismiss(notification):
    notification.dismiss()
    return notification


@then(parsers.cfparse("the notification has been attempted {count:d} times"))
def attempted(notification, count):
    assert notification.retry_count == count


@then("the notification is read and dismissed")
def read_and_dismissed(notification):
    assert notification.is_read is True
    assert notification.is_dismissed is True
