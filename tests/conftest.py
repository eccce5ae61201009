"""
Test fixtures and configuration for pytest
"""
import pytest
import pytest_asyncio
import httpx

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings
from turbo.client import TurboClient, TurboSession
from turbo.pagination import PAGE_SIZE


SESSION_COOKIE = 'JSESSIONID=abc123'


class FakeTurbo:
    """In-memory Turbonomic API served through httpx.MockTransport

    Paginated endpoints slice their records by `cursor` and answer with the
    same headers Turbonomic uses.
    """

    def __init__(self, actions=None, groups=None, containers=None, fail_paths=()):
        self.actions = actions or []
        self.groups = groups or []
        # member uuid -> container display name
        self.containers = containers or {}
        self.fail_paths = set(fail_paths)
        self.requests = []

    def _page(self, records, request):
        cursor = int(request.url.params.get('cursor', 0))
        next_cursor = cursor + PAGE_SIZE
        headers = {
            'x-total-record-count': str(len(records)),
            'x-next-cursor': str(next_cursor) if next_cursor < len(records) else '',
        }
        return httpx.Response(200, json=records[cursor:next_cursor], headers=headers)

    def handler(self, request):
        self.requests.append(request)
        path = request.url.path
        if path in self.fail_paths:
            return httpx.Response(500, text='internal error')
        if path == '/vmturbo/rest/login':
            return httpx.Response(200, headers={'set-cookie': f'{SESSION_COOKIE}; Path=/; HttpOnly'})
        if request.headers.get('cookie') != SESSION_COOKIE:
            return httpx.Response(401, text='unauthorized')
        if path == '/api/v3/markets/Market/actions':
            return self._page(self.actions, request)
        if path == '/api/v3/search':
            return self._page(self.groups, request)
        if path == '/api/v3/supplychains':
            uuids = request.url.params.get_list('uuids')
            instances = {u: {'displayName': self.containers[u]} for u in uuids if u in self.containers}
            if not instances:
                return httpx.Response(200, json={'seMap': {}})
            return httpx.Response(200, json={'seMap': {'ContainerSpec': {'instances': instances}}})
        return httpx.Response(404, text='not found')

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, path):
        return [r for r in self.requests if r.url.path == path]


def make_group(uuid, display_name, members, cluster='cluster1'):
    return {
        'uuid': uuid,
        'displayName': display_name,
        'source': {'displayName': cluster},
        'memberUuidList': list(members),
    }


def make_action(target_uuid, compound_actions, sub_category='Performance', description='Underallocated VCPU'):
    return {
        'uuid': f'action-{target_uuid}',
        'target': {'uuid': target_uuid},
        'risk': {'subCategory': sub_category, 'description': description},
        'compoundActions': compound_actions,
    }


def make_compound(container_name, action_type='RESIZE', commodity='VCPU', current=1, resize_to=2, units='vCPU'):
    return {
        'actionType': action_type,
        'target': {'displayName': container_name},
        'risk': {'reasonCommodity': commodity},
        'current_value': current,
        'resizeToValue': resize_to,
        'valueUnits': units,
    }


@pytest.fixture
def settings(tmp_path):
    """Valid run settings writing into a temporary directory"""
    return Settings(
        turbo_url='https://turbo.example.com',
        username='admin',
        password='secret',
        pod_search_query={'types': 'Group', 'group_type': 'ContainerPod'},
        excluded_groups=['kube-system'],
        output_filename=str(tmp_path / 'container-actions.json'),
        timeout_seconds=10,
        verify_ssl=True,
        group_request_limit=25,
    )


@pytest.fixture
def session():
    return TurboSession(base_url='https://turbo.example.com', cookie=SESSION_COOKIE)


@pytest.fixture
def sample_group():
    """Pod group from the Turbonomic search endpoint"""
    return make_group('g1', 'Deployment/ns1/app Pods', ['c1'])


@pytest.fixture
def sample_action():
    """Action targeting container c1 with a single resize"""
    return make_action('c1', [make_compound('container1')])


@pytest.fixture
def fake_turbo(sample_group, sample_action):
    return FakeTurbo(
        actions=[sample_action],
        groups=[sample_group],
        containers={'c1': 'container1'},
    )


@pytest_asyncio.fixture
async def turbo_client(fake_turbo, session):
    """Authenticated client bound to fake_turbo"""
    async with fake_turbo.http_client() as http:
        yield TurboClient(http, session)
