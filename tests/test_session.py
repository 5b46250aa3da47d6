import pytest

from cti_extractor.extraction import (
    AuthError,
    ExtractionSession,
    FormatError,
    ParseState,
)


class StubExtractor:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def extract(self, text):
        self.calls.append(text)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def test_submit_records_result(sample_result):
    session = ExtractionSession(StubExtractor(sample_result))

    state = session.submit('report text')

    assert state == ParseState(result=sample_result)
    assert not session.needs_credential


def test_submit_ignores_blank_text(sample_result):
    extractor = StubExtractor(sample_result)
    session = ExtractionSession(extractor)

    assert session.submit('   ') == ParseState()
    assert extractor.calls == []


def test_auth_failure_asks_for_credential():
    session = ExtractionSession(StubExtractor(AuthError("Authentication failed")))

    state = session.submit('report')

    assert isinstance(state.error, AuthError)
    assert state.result is None
    assert not state.is_parsing
    assert session.needs_credential


def test_format_failure_does_not_ask_for_credential():
    session = ExtractionSession(StubExtractor(FormatError("bad output")))

    state = session.submit('report')

    assert isinstance(state.error, FormatError)
    assert not session.needs_credential


def test_newer_request_supersedes_older_one(sample_result, empty_result):
    session = ExtractionSession(StubExtractor(sample_result))

    first = session.begin()
    second = session.begin()

    assert session.complete(first, sample_result) is False
    assert session.state.is_parsing
    assert session.fail(first, FormatError("late failure")) is False
    assert session.complete(second, empty_result) is True
    assert session.state == ParseState(result=empty_result)


def test_previous_result_stays_visible_while_parsing(sample_result):
    session = ExtractionSession(StubExtractor(sample_result))
    session.submit('report')

    session.begin()

    assert session.state.is_parsing
    assert session.state.result == sample_result
    assert session.state.error is None


def test_clear_resets_and_supersedes(sample_result):
    session = ExtractionSession(StubExtractor(sample_result))
    ticket = session.begin()

    session.clear()

    assert session.complete(ticket, sample_result) is False
    assert session.state == ParseState()


def test_value_errors_propagate():
    session = ExtractionSession(StubExtractor(ValueError("Report text is empty")))
    with pytest.raises(ValueError):
        session.submit('report')


def test_unexpected_errors_stop_parsing(sample_result):
    extractor = StubExtractor(sample_result)
    session = ExtractionSession(extractor)
    session.submit('first report')

    extractor.outcome = RuntimeError("extractor crashed")
    with pytest.raises(RuntimeError):
        session.submit('second report')

    assert not session.state.is_parsing
    assert session.state.result == sample_result
    assert session.state.error is None
