from memory_chat.domain.faults import GenericFault, TransportFault
from memory_chat.resources.classifier import classify
from memory_chat.resources.presentation import ErrorView


def test_no_error_means_nothing_to_show():
    view = ErrorView(error=None)
    assert not view.can_retry
    assert not view.exhausted
    assert view.status_message is None


def test_retry_offered_only_when_eligible():
    err = classify(TransportFault(status=0))
    assert ErrorView(error=err, retry_count=0, max_retries=3).can_retry
    assert not ErrorView(error=err, retry_count=3, max_retries=3).can_retry
    assert not ErrorView(error=err, retry_count=0, max_retries=3, retrying=True).can_retry
    assert not ErrorView(error=classify(TransportFault(status=403))).can_retry


def test_trigger_retry_is_noop_when_ineligible():
    calls = []
    exhausted = ErrorView(error=classify(GenericFault(message="x")), retry_count=3, max_retries=3)
    assert not exhausted.trigger_retry(lambda: calls.append(1))
    assert calls == []
    assert exhausted.exhausted
    assert exhausted.status_message == "x Maximum retry attempts reached."

    ready = ErrorView(error=classify(GenericFault(message="x")))
    assert ready.trigger_retry(lambda: calls.append(1))
    assert calls == [1]
    assert ready.title == "Error Loading Data"
    assert ready.show_retry
