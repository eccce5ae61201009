"""
Tests for the action and pod group retrievers
"""
import json
from functools import partial

import pytest

from turbo.actions import DEFAULT_ACTIONS_BODY, get_actions
from turbo.client import TurboClient, TurboError
from turbo.search import exclude_groups, search

from conftest import FakeTurbo, make_action, make_compound, make_group

ACTIONS_PATH = '/api/v3/markets/Market/actions'
SEARCH_PATH = '/api/v3/search'


class TestGetActions:
    """Tests for get_actions()"""

    @pytest.mark.asyncio
    async def test_single_page(self, fake_turbo, turbo_client, sample_action):
        actions = await get_actions(turbo_client)

        assert actions == [sample_action]
        requests = fake_turbo.requests_to(ACTIONS_PATH)
        assert len(requests) == 1
        assert json.loads(requests[0].content) == DEFAULT_ACTIONS_BODY

    @pytest.mark.asyncio
    async def test_all_pages_are_retrieved(self, session):
        all_actions = [make_action(f'c{i}', [make_compound(f'container{i}')]) for i in range(1203)]
        fake = FakeTurbo(actions=all_actions)

        async with fake.http_client() as http:
            actions = await get_actions(TurboClient(http, session))

        assert len(actions) == 1203
        assert sorted(a['target']['uuid'] for a in actions) == sorted(a['target']['uuid'] for a in all_actions)
        cursors = sorted(r.url.params.get('cursor') or '' for r in fake.requests_to(ACTIONS_PATH))
        assert cursors == ['', '1000', '500']

    @pytest.mark.asyncio
    async def test_custom_body_is_sent_on_every_page(self, session):
        body = {'actionStateList': ['READY']}
        fake = FakeTurbo(actions=[make_action(f'c{i}', []) for i in range(600)])

        async with fake.http_client() as http:
            await get_actions(TurboClient(http, session), body=body)

        for request in fake.requests_to(ACTIONS_PATH):
            assert json.loads(request.content) == body

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, session):
        fake = FakeTurbo(fail_paths=[ACTIONS_PATH])

        async with fake.http_client() as http:
            with pytest.raises(TurboError) as exc_info:
                await get_actions(TurboClient(http, session))

        assert str(exc_info.value).startswith('Error retrieving actions from Turbonomic:')


class TestExcludeGroups:
    """Tests for the exclusion predicate"""

    def test_group_without_excluded_substring_is_kept(self):
        assert exclude_groups(['kube-system'], {'displayName': 'Deployment/ns1/app Pods'}) is True

    def test_group_with_excluded_substring_is_dropped(self):
        assert exclude_groups(['kube-system', 'istio'], {'displayName': 'DaemonSet/istio-system/proxy Pods'}) is False

    def test_empty_exclusion_list_keeps_everything(self):
        assert exclude_groups([], {'displayName': 'anything'}) is True

    def test_missing_display_name_is_kept(self):
        assert exclude_groups(['x'], {}) is True


class TestSearch:
    """Tests for search()"""

    @pytest.mark.asyncio
    async def test_query_params_are_forwarded(self, fake_turbo, turbo_client):
        await search(turbo_client, {'types': 'Group', 'group_type': 'ContainerPod'})

        request = fake_turbo.requests_to(SEARCH_PATH)[0]
        assert request.url.params['types'] == 'Group'
        assert request.url.params['group_type'] == 'ContainerPod'

    @pytest.mark.asyncio
    async def test_filter_applies_to_every_page(self, session):
        groups = [make_group(f'g{i}', f'Deployment/ns{i % 3}/app{i} Pods', []) for i in range(1100)]
        fake = FakeTurbo(groups=groups)

        async with fake.http_client() as http:
            results = await search(
                TurboClient(http, session),
                {'types': 'Group'},
                partial(exclude_groups, ['/ns0/']),
            )

        expected = {g['uuid'] for g in groups if '/ns0/' not in g['displayName']}
        assert {g['uuid'] for g in results} == expected
        assert len(results) == len(expected)
        # later pages repeat the caller's query
        for request in fake.requests_to(SEARCH_PATH):
            assert request.url.params['types'] == 'Group'

    @pytest.mark.asyncio
    async def test_without_filter_returns_everything(self, fake_turbo, turbo_client, sample_group):
        assert await search(turbo_client, {}) == [sample_group]

    @pytest.mark.asyncio
    async def test_failure_is_wrapped(self, session):
        fake = FakeTurbo(fail_paths=[SEARCH_PATH])

        async with fake.http_client() as http:
            with pytest.raises(TurboError, match='Error retrieving search results from Turbonomic'):
                await search(TurboClient(http, session), {})
