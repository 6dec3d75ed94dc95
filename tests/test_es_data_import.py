import json

import pytest
import requests

from treehash import es_data_import
from treehash.errors import IndexingError


class FakeResponse:
    def __init__(self, status_code=201, text='{"result": "created"}'):
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError('%s Error' % self.status_code, response=self)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def post(self, url, data=None, headers=None):
        self.calls.append((url, data, headers))
        if self.error is not None:
            raise self.error
        return self.response


def test_post_sends_json_document():
    session = FakeSession()
    data = {'filename': 'a.bin', 'treehash': 'ab' * 32, 'size': 3}
    r = es_data_import.post('vault', 'archive', data, host='es', port='9200', session=session)
    assert r is session.response
    url, body, headers = session.calls[0]
    assert url == 'http://es:9200/vault/archive'
    assert json.loads(body) == data
    assert headers['Content-Type'] == 'application/json'


def test_post_http_error():
    session = FakeSession(response=FakeResponse(status_code=400, text='bad'))
    with pytest.raises(IndexingError):
        es_data_import.post('vault', 'archive', {}, session=session)


def test_post_connection_error():
    session = FakeSession(error=requests.ConnectionError('refused'))
    with pytest.raises(IndexingError) as exc_info:
        es_data_import.post('vault', 'archive', {}, session=session)
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_main_merges_extra_data(monkeypatch):
    posted = []
    monkeypatch.setattr(es_data_import, 'post', lambda *args: posted.append(args))
    monkeypatch.setattr('sys.argv', ['es_data_import', '--index', 'vault',
                                     '--data', '{"a": 1}', '--extra', '{"b": 2}'])
    assert es_data_import.main() == 0
    assert posted == [('vault', 'archive', {'a': 1, 'b': 2})]


def test_main_without_data(monkeypatch):
    monkeypatch.setattr('sys.argv', ['es_data_import', '--index', 'vault'])
    assert es_data_import.main() == 1


def test_main_without_index(monkeypatch):
    posted = []
    monkeypatch.setattr(es_data_import, 'post', lambda *args: posted.append(args))
    monkeypatch.setattr('sys.argv', ['es_data_import', '--data', '{"a": 1}'])
    assert es_data_import.main() == 1
    assert posted == []


def test_main_reports_indexing_error(monkeypatch, caplog):
    def failing_post(*args):
        raise IndexingError('connection refused')

    monkeypatch.setattr(es_data_import, 'post', failing_post)
    monkeypatch.setattr('sys.argv', ['es_data_import', '--index', 'vault', '--data', '{"a": 1}'])
    assert es_data_import.main() == 1
    assert 'connection refused' in caplog.text


def test_post_closes_its_own_session(monkeypatch):
    class ClosingSession(FakeSession):
        closed = False

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            self.closed = True

    sessions = []

    def new_session():
        sessions.append(ClosingSession())
        return sessions[-1]

    monkeypatch.setattr(es_data_import.requests, 'Session', new_session)
    es_data_import.post('vault', 'archive', {'a': 1})
    es_data_import.post('vault', 'archive', {'a': 2})
    assert [s.closed for s in sessions] == [True, True]
    assert len(sessions[0].calls) == 1
