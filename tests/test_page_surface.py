from __future__ import annotations

import asyncio
import json

import pytest

from conftest import FakeSurface

from ampmon.remote.page_surface import (
    QueryTimeout,
    SerializedSurface,
    SurfaceNotReady,
    decode_script_json,
    unwrap_script_result,
)


def test_unwrap_strips_one_layer_of_quoting() -> None:
    inner = json.dumps({"k": 'say "hi"', "p": "a\\b"})
    wrapped = json.dumps(inner)
    assert unwrap_script_result(wrapped) == inner


def test_unwrap_leaves_unquoted_results_alone() -> None:
    raw = '{"a": "1"}'
    assert unwrap_script_result(raw) == raw
    assert unwrap_script_result("") == ""
    assert unwrap_script_result(None) is None
    assert unwrap_script_result('"') == '"'


def test_decode_handles_wrapped_and_plain_json() -> None:
    payload = {"values/swr": "1.5"}
    assert decode_script_json(json.dumps(payload)) == payload
    assert decode_script_json(json.dumps(json.dumps(payload))) == payload


def test_decode_blank_is_none_and_garbage_raises() -> None:
    assert decode_script_json("  ") is None
    assert decode_script_json(None) is None
    with pytest.raises(ValueError):
        decode_script_json("{not json")


def test_serialized_surface_refuses_when_not_ready() -> None:
    surface = SerializedSurface(FakeSurface(ready=False))
    with pytest.raises(SurfaceNotReady):
        asyncio.run(surface.run_query("anything"))


def test_serialized_surface_times_out() -> None:
    fake = FakeSurface({"values/swr": "1.0"})
    fake.delay_s = 1.0
    surface = SerializedSurface(fake, timeout_s=0.05)

    async def scenario() -> None:
        await surface.query_json("document.querySelectorAll('[' + attr + ']')")

    with pytest.raises(QueryTimeout):
        asyncio.run(scenario())


def test_serialized_surface_never_runs_queries_concurrently() -> None:
    fake = FakeSurface({"values/swr": "1.0"})
    fake.delay_s = 0.01
    surface = SerializedSurface(fake, timeout_s=1.0)
    script = "document.querySelectorAll('[' + attr + ']')"

    async def scenario() -> list:
        return await asyncio.gather(*(surface.query_json(script) for _ in range(5)))

    results = asyncio.run(scenario())
    assert results == [{"values/swr": "1.0"}] * 5
    assert fake.max_active == 1
