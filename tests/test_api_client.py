import asyncio

import httpx
import pytest

from career_compass.application.api_client import ApiClient
from career_compass.domain.models.envelope import RequestOptions, UploadFile
from career_compass.domain.models.errors import NetworkError, ServerError, ValidationError
from career_compass.infrastructure.config.settings import ApiSettings

from fakes import BASE_URL, body_of


def _ok(data=None):
    return {'success': True, 'data': data}


@pytest.mark.asyncio
async def test_verbs_map_to_methods_and_bodies(backend, client):
    for method in ('GET', 'POST', 'PUT', 'PATCH', 'DELETE'):
        backend.route(method, '/items', json_body=_ok(method))

    assert (await client.get('/items')).data == 'GET'
    assert (await client.post('/items', {'a': 1})).data == 'POST'
    assert (await client.put('/items', {'b': 2})).data == 'PUT'
    assert (await client.patch('/items', {'c': 3})).data == 'PATCH'
    assert (await client.delete('/items')).data == 'DELETE'

    methods = [r.method for r in backend.requests]
    assert methods == ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']
    assert backend.requests[0].content == b''
    assert body_of(backend.requests[1]) == {'a': 1}
    assert body_of(backend.requests[3]) == {'c': 3}


@pytest.mark.asyncio
async def test_get_sends_query_params(backend, client):
    backend.route('GET', '/analysis/history', json_body=_ok([]))
    await client.get('/analysis/history', {'page': 2, 'status': None, 'q': 'a b'})
    request = backend.requests[0]
    assert request.url.params['page'] == '2'
    assert request.url.params['q'] == 'a b'
    assert 'status' not in request.url.params


@pytest.mark.asyncio
async def test_delete_keeps_caller_body(backend, client):
    backend.route('DELETE', '/user/account', json_body=_ok())
    await client.delete('/user/account', RequestOptions(body={'confirmationToken': 'c'}))
    assert body_of(backend.requests[0]) == {'confirmationToken': 'c'}


@pytest.mark.asyncio
async def test_protected_endpoint_without_token_sends_no_authorization(backend, client):
    backend.route('GET', '/user/profile', status=401, json_body={'success': False, 'message': 'Unauthorized'})
    with pytest.raises(ValidationError) as exc:
        await client.get('/user/profile')
    assert exc.value.status_code == 401
    assert 'authorization' not in backend.requests[0].headers


@pytest.mark.asyncio
async def test_token_provider_supplies_bearer(backend, client):
    backend.route('GET', '/user/profile', json_body=_ok({}))
    client.set_token_provider(lambda: 'T9')
    await client.get('/user/profile')
    assert backend.requests[0].headers['authorization'] == 'Bearer T9'


@pytest.mark.asyncio
async def test_upload_reports_progress_and_sends_multipart(backend, client):
    backend.route('POST', '/files', json_body=_ok({'id': 'f1'}))
    progress = []

    envelope = await client.upload_file(
        '/files',
        UploadFile('notes.txt', b'hello', 'text/plain'),
        extra_fields={'label': 'mine'},
        on_progress=progress.append,
    )

    assert envelope.data == {'id': 'f1'}
    assert progress == [0, 100]
    request = backend.requests[0]
    assert request.headers['content-type'].startswith('multipart/form-data')
    assert b'name="file"; filename="notes.txt"' in request.content
    assert b'name="label"' in request.content


@pytest.mark.asyncio
async def test_upload_failure_stops_progress_at_zero(backend, client):
    backend.route('POST', '/files', status=413, json_body={'success': False, 'message': 'Too large'})
    progress = []
    with pytest.raises(ValidationError):
        await client.upload_file('/files', UploadFile('big.bin', b'x'), on_progress=progress.append)
    assert progress == [0]


@pytest.mark.asyncio
async def test_health_check_is_public(backend, client):
    backend.route('GET', '/health', json_body={'success': True, 'message': 'ok'})
    client.set_token_provider(lambda: 'T1')
    envelope = await client.health_check()
    assert envelope.message == 'ok'
    assert 'authorization' not in backend.requests[0].headers


@pytest.mark.asyncio
async def test_health_check_failure_is_503(backend, client):
    def down(request):
        raise httpx.ConnectError('down', request=request)

    backend.route('GET', '/health', handler=down)
    with pytest.raises(ServerError) as exc:
        await client.health_check()
    assert exc.value.status_code == 503
    assert exc.value.message == 'API health check failed'
    assert isinstance(exc.value.__cause__, NetworkError)


@pytest.mark.asyncio
async def test_concurrent_requests_are_independent(backend, client):
    async def delayed(request):
        await asyncio.sleep(0.01 if request.url.params['n'] == '1' else 0)
        return httpx.Response(200, json=_ok(request.url.params['n']))

    backend.route('GET', '/echo', handler=delayed)
    first, second = await asyncio.gather(client.get('/echo', {'n': 1}), client.get('/echo', {'n': 2}))
    assert (first.data, second.data) == ('1', '2')


@pytest.mark.asyncio
async def test_from_settings_uses_configured_base_url(backend):
    settings = ApiSettings(url=BASE_URL + '/', timeout_ms=1234)
    backend.route('GET', '/ping', json_body=_ok('pong'))
    async with ApiClient.from_settings(settings, transport=backend.transport()) as client:
        assert client.base_url == BASE_URL
        assert (await client.get('/ping')).data == 'pong'
