from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from progress_bridge.engine.bundle import MessageBundle
from progress_bridge.engine.classifier import (
    convert_build_event_display_name,
    legacy_convert_build_event_display_name,
)
from progress_bridge.engine.identity import DEFAULT_MAX_DEPTH, create_event_id, create_event_ids
from progress_bridge import models
from progress_bridge.runtime import events


LOGGER_NAME = "progress_bridge.event_processing"


class EventConverter:
    """
    Translates build-tool progress events into host notifications.

    Stateless: every call reads only its arguments and the message bundle.
    Unrecognized results are logged as warnings and produce no notification.
    """

    def __init__(
        self,
        bundle: Optional[Callable[..., str]] = None,
        logger: Optional[logging.Logger] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._translate = bundle if bundle is not None else MessageBundle.load()
        self._log = logger if logger is not None else logging.getLogger(LOGGER_NAME)
        self._max_depth = max_depth

    def _event_id(self, descriptor: models.OperationDescriptor, operation_id: str) -> str:
        return create_event_id(descriptor, operation_id, self._max_depth, self._log)

    def create_task_notification_event(
        self,
        task_id: Any,
        operation_id: str,
        event: models.ProgressEvent,
    ) -> Optional[events.TaskNotificationEvent]:
        if isinstance(event, models.TaskProgressEvent):
            return self._convert_task_progress_event(event, task_id, operation_id)
        return self._convert_test_progress_event(event, task_id, operation_id)

    # Tasks

    def _convert_task_progress_event(
        self,
        event: models.TaskProgressEvent,
        task_id: Any,
        operation_id: str,
    ) -> Optional[events.TaskNotificationEvent]:
        event_id = self._event_id(event.descriptor, operation_id)
        event_time = event.event_time
        message = event.descriptor.name

        if isinstance(event, models.TaskStartEvent):
            return events.BuildNotificationEvent.of(
                task_id, events.StartBuildEvent(event_id, task_id, event_time, message)
            )

        if isinstance(event, models.TaskFinishEvent):
            result = self._convert_task_result(event.result)
            if result is None:
                return None
            return events.BuildNotificationEvent.of(
                task_id, events.FinishBuildEvent(event_id, task_id, event_time, message, result)
            )

        if isinstance(event, models.StatusEvent):
            return events.BuildNotificationEvent.of(
                task_id,
                events.ProgressBuildEvent(
                    event_id, task_id, event_time, message, event.total, event.progress, event.unit
                ),
            )

        self._log.warning("Undefined build event %s %s", type(event).__name__, _describe(event))
        return events.TaskNotificationEvent(task_id, event.descriptor.name)

    def _convert_task_result(self, result: models.OperationResult) -> Optional[events.EventResult]:
        if isinstance(result, models.SuccessResult):
            up_to_date = isinstance(result, models.TaskSuccessResult) and result.up_to_date
            return events.SuccessEventResult(up_to_date=up_to_date)
        if isinstance(result, models.FailureResult):
            return events.FailureEventResult()
        if isinstance(result, models.SkippedResult):
            return events.SkippedEventResult()

        self._log.warning("Undefined operation result %s %r", type(result).__name__, result)
        return None

    # Tests

    def _convert_test_progress_event(
        self,
        event: models.ProgressEvent,
        task_id: Any,
        operation_id: str,
    ) -> Optional[events.TaskNotificationEvent]:
        event_id, parent_event_id = create_event_ids(event.descriptor, operation_id, self._max_depth, self._log)
        descriptor = convert_test_descriptor(event)

        if isinstance(event, models.TestStartEvent):
            return events.TaskExecutionNotificationEvent.of(
                task_id, events.ExecutionStartEvent(event_id, parent_event_id, descriptor)
            )

        if isinstance(event, models.TestFinishEvent):
            result = self._convert_test_result(event.result)
            if result is None:
                return None
            return events.TaskExecutionNotificationEvent.of(
                task_id, events.ExecutionFinishEvent(event_id, parent_event_id, descriptor, result)
            )

        if isinstance(event, models.TestOutputEvent):
            output = event.descriptor
            is_std_out = output.destination == models.Destination.STD_OUT
            description = ("StdOut" if is_std_out else "StdErr") + output.message
            return events.TaskExecutionNotificationEvent.of(
                task_id,
                events.ExecutionMessageEvent(
                    event_id, parent_event_id, descriptor, is_std_out, output.message, description
                ),
            )

        return None

    def _convert_test_result(self, result: models.OperationResult) -> Optional[events.TestOperationResult]:
        start_time = result.start_time
        end_time = result.end_time

        if isinstance(result, models.TestSuccessResult):
            return events.TestSuccessResult(start_time, end_time, False)
        if isinstance(result, models.TestFailureResult):
            failures = tuple(convert_test_failure(f) for f in result.failures)
            return events.TestFailureResult(start_time, end_time, failures)
        if isinstance(result, models.TestSkippedResult):
            return events.TestSkippedResult(start_time, end_time)

        self._log.warning("Undefined test operation result %s %r", type(result).__name__, result)
        return None

    # Progress titles

    def convert_progress_build_event(
        self,
        task_id: Any,
        id: Any,
        event: models.ProgressEvent,
    ) -> Optional[events.BuildNotificationEvent]:
        total, progress, unit = -1, -1, ""
        if isinstance(event, models.StatusEvent):
            total, progress, unit = event.total, event.progress, event.unit

        operation_name = convert_build_event_display_name(event, self._translate)
        if operation_name is None:
            return None

        return events.BuildNotificationEvent.of(
            task_id,
            events.ProgressBuildEvent(id, None, event.event_time, operation_name + "...", total, progress, unit),
        )

    def legacy_convert_progress_build_event(
        self,
        task_id: Any,
        id: Any,
        event: str,
    ) -> Optional[events.BuildNotificationEvent]:
        operation_name = legacy_convert_build_event_display_name(event, self._translate)
        if operation_name is None:
            return None

        # Free-text events carry no timestamp
        return events.BuildNotificationEvent.of(
            task_id,
            events.ProgressBuildEvent(id, None, 0, operation_name + "...", -1, -1, ""),
        )

    @staticmethod
    def legacy_convert_task_notification_event(task_id: Any, event: str) -> events.TaskNotificationEvent:
        return events.TaskNotificationEvent(task_id, event)


def _describe(event: models.ProgressEvent) -> str:
    # Descriptor chains may be cyclic; never repr the whole chain
    fields = event.model_dump(exclude={"descriptor"})
    return f"{fields} descriptor={event.descriptor.display_name!r}"


def convert_test_failure(failure: models.Failure) -> events.FailureRecord:
    message = failure.message
    description = failure.description
    causes = tuple(convert_test_failure(c) for c in failure.causes)

    if isinstance(failure, models.TestAssertionFailure):
        expected = failure.expected
        actual = failure.actual
        if message is not None and expected is not None and actual is not None:
            return events.AssertionFailureRecord(
                message=message,
                description=description,
                causes=causes,
                expected_text=expected,
                actual_text=actual,
            )

    return events.FailureRecord(message=message, description=description, causes=causes)


def convert_test_descriptor(event: models.ProgressEvent) -> events.TestOperationDescriptor:
    descriptor = event.descriptor
    if isinstance(descriptor, models.JvmTestOperationDescriptor):
        return events.TestOperationDescriptor(
            display_name=descriptor.display_name,
            event_time=event.event_time,
            suite_name=descriptor.suite_name,
            class_name=descriptor.class_name,
            method_name=descriptor.method_name,
        )
    return events.TestOperationDescriptor(descriptor.display_name, event.event_time)


_default: Optional[EventConverter] = None


def default_converter() -> EventConverter:
    global _default
    if _default is None:
        _default = EventConverter()
    return _default


def create_task_notification_event(task_id: Any, operation_id: str, event: models.ProgressEvent):
    return default_converter().create_task_notification_event(task_id, operation_id, event)


def convert_progress_build_event(task_id: Any, id: Any, event: models.ProgressEvent):
    return default_converter().convert_progress_build_event(task_id, id, event)


def legacy_convert_progress_build_event(task_id: Any, id: Any, event: str):
    return default_converter().legacy_convert_progress_build_event(task_id, id, event)


def legacy_convert_task_notification_event(task_id: Any, event: str) -> events.TaskNotificationEvent:
    return EventConverter.legacy_convert_task_notification_event(task_id, event)
