# =============================================================================
# FILE: tests/test_rpc.py
"""
Unit Tests for the raw JSON-RPC client and the endpoint scenario

HTTP is served by httpx.MockTransport, so no node is needed.
"""
import json

import httpx
import pytest

from sale_harness.modules.rpc import RPCClient
from sale_harness.modules.scenarios import check_rpc_endpoint
from sale_harness.utils.deadline import Deadline
from sale_harness.utils.errors import DeadlineExceeded, RPCError

URL = "http://anvil.test:8545"


def _client(handler, **kwargs):
    return RPCClient(URL, transport=httpx.MockTransport(handler), **kwargs)


class TestRPCClient:
    """Test request shape and response handling"""

    def test_block_number_request(self):
        """eth_blockNumber is posted as a JSON-RPC 2.0 envelope"""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x0"})

        with _client(handler) as client:
            response = client.call('eth_blockNumber')

        assert response.status_code == 200
        assert response.result == "0x0"
        assert json.loads(seen[0].content) == {
            "jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1
        }
        assert seen[0].headers['content-type'] == 'application/json'
        assert seen[0].method == 'POST'

    def test_ids_increment(self):
        ids = []

        def handler(request):
            ids.append(json.loads(request.content)['id'])
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": ids[-1], "result": "0x1"})

        with _client(handler) as client:
            client.call('eth_chainId')
            client.call('eth_chainId')

        assert ids == [1, 2]

    def test_block_number_parses_hex(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x1f"})

        with _client(handler) as client:
            assert client.block_number() == 31

    @pytest.mark.parametrize("result,message", [
        (None, "no result"),
        (17, "not a hex quantity"),
        ("latest", "not a hex quantity"),
    ])
    def test_block_number_rejects_bad_result(self, result, message):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

        with _client(handler) as client:
            with pytest.raises(RPCError, match=message) as exc_info:
                client.block_number()

        assert exc_info.value.status_code == 200

    def test_rpc_level_error_is_returned(self):
        """JSON-RPC errors come back with HTTP 200 and are not raised"""
        def handler(request):
            return httpx.Response(200, json={
                "jsonrpc": "2.0", "id": 1,
                "error": {"code": -32601, "message": "Method not found"}
            })

        with _client(handler) as client:
            response = client.call('eth_nope')

        assert not response.has_result
        assert response.error['code'] == -32601

    def test_non_200_is_rpc_error(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        with _client(handler) as client:
            with pytest.raises(RPCError) as exc_info:
                client.call('eth_blockNumber')

        assert exc_info.value.status_code == 503
        assert not isinstance(exc_info.value, DeadlineExceeded)

    def test_non_json_body_is_rpc_error(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with _client(handler) as client:
            with pytest.raises(RPCError, match="non-JSON"):
                client.call('eth_blockNumber')

    def test_connection_refused_is_rpc_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with _client(handler) as client:
            with pytest.raises(RPCError, match="transport error"):
                client.call('eth_blockNumber')


class TestDeadlines:
    """Test that timeouts are reported distinctly"""

    def test_timeout_is_deadline_exceeded(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with _client(handler) as client:
            with pytest.raises(DeadlineExceeded):
                client.call('eth_blockNumber')

    def test_expired_deadline_skips_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"result": "0x0"})

        now = [0.0]
        deadline = Deadline(1.0, clock=lambda: now[0])
        now[0] = 5.0

        with _client(handler, deadline=deadline) as client:
            with pytest.raises(DeadlineExceeded):
                client.call('eth_blockNumber')

        assert calls == []

    def test_cancelled_deadline_skips_request(self):
        def handler(request):
            return httpx.Response(200, json={"result": "0x0"})

        deadline = Deadline(10.0)
        deadline.cancel()

        with _client(handler, deadline=deadline) as client:
            with pytest.raises(DeadlineExceeded, match="cancelled"):
                client.call('eth_blockNumber')

    def test_deadline_caps_request_timeout(self):
        timeouts = []

        def handler(request):
            timeouts.append(request.extensions['timeout'])
            return httpx.Response(200, json={"result": "0x0"})

        now = [0.0]
        deadline = Deadline(3.0, clock=lambda: now[0])

        with _client(handler, timeout=10.0, deadline=deadline) as client:
            client.call('eth_blockNumber')

        assert timeouts[0]['read'] == 3.0


class TestEndpointScenario:

    def test_check_rpc_endpoint(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x0"})

        with _client(handler) as client:
            response = check_rpc_endpoint(client)

        assert response.status_code == 200
        assert 'result' in response.body

    def test_missing_result_fails(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

        with _client(handler) as client:
            with pytest.raises(RPCError, match="no result"):
                check_rpc_endpoint(client)

    def test_null_result_fails(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None})

        with _client(handler) as client:
            with pytest.raises(RPCError, match="no result"):
                check_rpc_endpoint(client)

    def test_non_hex_result_fails(self):
        def handler(request):
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"number": 1}})

        with _client(handler) as client:
            with pytest.raises(RPCError, match="hex quantity"):
                check_rpc_endpoint(client)


class TestDeadline:

    def test_remaining_counts_down(self):
        now = [0.0]
        deadline = Deadline(10.0, clock=lambda: now[0])
        now[0] = 4.0
        assert deadline.remaining() == 6.0
        assert not deadline.expired
        assert deadline.timeout_for(2.0) == 2.0
        assert deadline.timeout_for(None) == 6.0

    def test_rejects_non_positive_budget(self):
        with pytest.raises(ValueError):
            Deadline(0)

    def test_deadline_exceeded_is_timeout_error(self):
        deadline = Deadline(1.0)
        deadline.cancel()
        with pytest.raises(TimeoutError):
            deadline.remaining()
