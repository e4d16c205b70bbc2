"""Espresso idling resource commands.

Each operation forwards exactly one command through the injected proxy and
returns its (lightly typed) result. Nothing is validated, retried or timed out
here: failures raised by the proxy reach the caller untouched.

Idling resource classes are fully qualified Java class names, e.g.
`io.appium.espressoserver.lib.MyIdlingResource`. Each class in the app under
test must be a singleton with a static `getInstance()` returning an
`androidx.test.espresso.IdlingResource`. See
https://developer.android.com/training/testing/espresso/idling-resource
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from core.domain.models import IdlingResourceList
from core.errors import MalformedResponseError
from core.interfaces.proxy import CommandProxy

logger = logging.getLogger(__name__)

REGISTER_PATH = "/appium/execute_mobile/register_idling_resources"
UNREGISTER_PATH = "/appium/execute_mobile/unregister_idling_resources"
LIST_PATH = "/appium/execute_mobile/list_idling_resources"
UI_THREAD_SYNC_PATH = "/appium/execute_mobile/ui_thread_sync"

# Wire key of the register/unregister body; the value is never inspected.
CLASS_NAMES_KEY = "classNames"


class RemoteCommandInvoker:
    """Idling resource operations bound to an explicit proxy capability."""

    def __init__(self, proxy: CommandProxy) -> None:
        self._proxy = proxy

    async def register_idling_resources(self, class_names: str) -> None:
        """Register one or more idling resources.

        `class_names` is a comma-separated list of fully qualified class names,
        forwarded verbatim.
        """

        body = {CLASS_NAMES_KEY: class_names}
        logger.debug("Registering idling resources: %s", class_names)
        await self._proxy.command(REGISTER_PATH, "POST", body)

    async def unregister_idling_resources(self, class_names: str) -> None:
        """Unregister one or more idling resources (same format as register)."""

        body = {CLASS_NAMES_KEY: class_names}
        logger.debug("Unregistering idling resources: %s", class_names)
        await self._proxy.command(UNREGISTER_PATH, "POST", body)

    async def list_idling_resources(self) -> list[str]:
        """Return the fully qualified names of the registered idling resources.

        An empty list is returned when nothing is registered.
        """

        payload = await self._proxy.command(LIST_PATH, "GET")
        if payload is None:
            return []
        try:
            return IdlingResourceList.validate_python(payload)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Expected a list of class names from {LIST_PATH}, got {type(payload).__name__}",
                payload=payload,
            ) from exc

    async def wait_for_ui_thread(self) -> None:
        """Block until the application's UI thread reports idle."""

        await self._proxy.command(UI_THREAD_SYNC_PATH, "POST")
