"""Tests for the idling resource command invoker."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from core.errors import MalformedResponseError, RemoteInvocationError
from core.interfaces.proxy import CommandProxy
from core.services.idling_resources import (
    LIST_PATH,
    REGISTER_PATH,
    UI_THREAD_SYNC_PATH,
    UNREGISTER_PATH,
    RemoteCommandInvoker,
)
from tests.conftest import RecordingProxy


def _mock_proxy(return_value=None) -> AsyncMock:
    proxy = AsyncMock(spec=CommandProxy)
    proxy.command.return_value = return_value
    return proxy


class TestSingleCallContract:
    @pytest.mark.asyncio
    async def test_register_posts_class_names(self) -> None:
        proxy = _mock_proxy()
        invoker = RemoteCommandInvoker(proxy)

        result = await invoker.register_idling_resources(
            "com.example.MyIdler,com.example.OtherIdler"
        )

        assert result is None
        proxy.command.assert_awaited_once_with(
            "/appium/execute_mobile/register_idling_resources",
            "POST",
            {"classNames": "com.example.MyIdler,com.example.OtherIdler"},
        )

    @pytest.mark.asyncio
    async def test_unregister_posts_class_names(self) -> None:
        proxy = _mock_proxy()
        invoker = RemoteCommandInvoker(proxy)

        result = await invoker.unregister_idling_resources("com.example.MyIdler")

        assert result is None
        proxy.command.assert_awaited_once_with(
            UNREGISTER_PATH, "POST", {"classNames": "com.example.MyIdler"}
        )

    @pytest.mark.asyncio
    async def test_list_uses_get_without_body(self) -> None:
        proxy = _mock_proxy(["com.example.MyIdler"])
        invoker = RemoteCommandInvoker(proxy)

        result = await invoker.list_idling_resources()

        assert result == ["com.example.MyIdler"]
        proxy.command.assert_awaited_once_with(LIST_PATH, "GET")

    @pytest.mark.asyncio
    async def test_wait_for_ui_thread_posts_without_body(self) -> None:
        proxy = _mock_proxy({"ignored": True})
        invoker = RemoteCommandInvoker(proxy)

        result = await invoker.wait_for_ui_thread()

        assert result is None
        proxy.command.assert_awaited_once_with(
            "/appium/execute_mobile/ui_thread_sync", "POST"
        )
        assert UI_THREAD_SYNC_PATH == "/appium/execute_mobile/ui_thread_sync"


class TestPassThrough:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "class_names",
        [
            "com.example.MyIdler",
            " com.example.A , com.example.B ",
            "com.example.A,,com.example.A",
            "",
            "not a class name at all",
            "com.exämple.Ünïcode$Inner",
        ],
    )
    async def test_class_names_forwarded_verbatim(self, class_names: str) -> None:
        proxy = RecordingProxy()
        invoker = RemoteCommandInvoker(proxy)

        await invoker.unregister_idling_resources(class_names)
        await invoker.register_idling_resources(class_names)

        assert proxy.calls[0][2] == {"classNames": class_names}
        assert proxy.calls[1][2] == {"classNames": class_names}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("class_names", [["com.example.A"], 42, None])
    async def test_non_string_values_reach_the_server_untouched(
        self, class_names: object
    ) -> None:
        proxy = _mock_proxy()
        invoker = RemoteCommandInvoker(proxy)

        await invoker.register_idling_resources(class_names)
        await invoker.unregister_idling_resources(class_names)

        assert proxy.command.await_count == 2
        for call in proxy.command.await_args_list:
            assert call.args[2]["classNames"] is class_names


class TestListResponse:
    @pytest.mark.asyncio
    async def test_empty_registry_returns_empty_list(self) -> None:
        invoker = RemoteCommandInvoker(RecordingProxy())

        result = await invoker.list_idling_resources()

        assert result == []

    @pytest.mark.asyncio
    async def test_null_payload_returns_empty_list(self) -> None:
        invoker = RemoteCommandInvoker(_mock_proxy(None))

        assert await invoker.list_idling_resources() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            "com.example.MyIdler",
            {"value": ["com.example.MyIdler"]},
            ["com.example.MyIdler", 42],
            [None],
            42,
        ],
    )
    async def test_malformed_payload_is_rejected(self, payload: object) -> None:
        invoker = RemoteCommandInvoker(_mock_proxy(payload))

        with pytest.raises(MalformedResponseError) as excinfo:
            await invoker.list_idling_resources()

        assert excinfo.value.payload == payload

    @pytest.mark.asyncio
    async def test_register_then_list(self, recording_proxy: RecordingProxy) -> None:
        invoker = RemoteCommandInvoker(recording_proxy)

        await invoker.register_idling_resources(
            "com.example.MyIdler,com.example.OtherIdler"
        )
        result = await invoker.list_idling_resources()

        assert result == ["com.example.MyIdler", "com.example.OtherIdler"]
        assert [call[:2] for call in recording_proxy.calls] == [
            (REGISTER_PATH, "POST"),
            (LIST_PATH, "GET"),
        ]

    @pytest.mark.asyncio
    async def test_unregister_removes_from_list(
        self, recording_proxy: RecordingProxy
    ) -> None:
        invoker = RemoteCommandInvoker(recording_proxy)

        await invoker.register_idling_resources("com.example.A,com.example.B")
        await invoker.unregister_idling_resources("com.example.A")

        assert await invoker.list_idling_resources() == ["com.example.B"]


class TestErrorPropagation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation",
        [
            lambda invoker: invoker.register_idling_resources("com.example.Missing"),
            lambda invoker: invoker.unregister_idling_resources("com.example.Missing"),
            lambda invoker: invoker.list_idling_resources(),
            lambda invoker: invoker.wait_for_ui_thread(),
        ],
    )
    async def test_proxy_failure_propagates_unchanged(self, operation) -> None:
        failure = RemoteInvocationError(
            "Class com.example.Missing cannot be found", error="unknown error"
        )
        proxy = RecordingProxy(fail_with=failure)
        invoker = RemoteCommandInvoker(proxy)

        with pytest.raises(RemoteInvocationError) as excinfo:
            await operation(invoker)

        assert excinfo.value is failure
        assert len(proxy.calls) == 1

    @pytest.mark.asyncio
    async def test_foreign_exceptions_are_not_wrapped(self) -> None:
        proxy = _mock_proxy()
        proxy.command.side_effect = TimeoutError("socket timeout")
        invoker = RemoteCommandInvoker(proxy)

        with pytest.raises(TimeoutError, match="socket timeout"):
            await invoker.wait_for_ui_thread()

        assert proxy.command.await_count == 1


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_operations_can_run_concurrently(self) -> None:
        release = asyncio.Event()
        started: list[str] = []

        class SlowProxy:
            async def command(self, path, method, body=None):
                started.append(path)
                await release.wait()
                return [] if method == "GET" else None

        invoker = RemoteCommandInvoker(SlowProxy())
        tasks = [
            asyncio.create_task(invoker.wait_for_ui_thread()),
            asyncio.create_task(invoker.list_idling_resources()),
        ]
        while len(started) < 2:
            await asyncio.sleep(0)

        assert set(started) == {UI_THREAD_SYNC_PATH, LIST_PATH}
        release.set()
        assert await asyncio.gather(*tasks) == [None, []]
