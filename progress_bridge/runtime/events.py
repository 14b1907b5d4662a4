from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class TaskId:
    project_id: str
    type: str = "EXECUTE_TASK"
    id: str = "0"


# Build events

@dataclass(frozen=True)
class SuccessEventResult:
    up_to_date: bool = False


@dataclass(frozen=True)
class FailureEventResult:
    failures: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SkippedEventResult:
    pass


EventResult = Union[SuccessEventResult, FailureEventResult, SkippedEventResult]


@dataclass(frozen=True)
class StartBuildEvent:
    event_id: Any
    parent_id: Any
    event_time: int
    message: str


@dataclass(frozen=True)
class FinishBuildEvent:
    event_id: Any
    parent_id: Any
    event_time: int
    message: str
    result: EventResult


@dataclass(frozen=True)
class ProgressBuildEvent:
    event_id: Any
    parent_id: Any
    event_time: int
    message: str
    total: int
    progress: int
    unit: str


BuildEvent = Union[StartBuildEvent, FinishBuildEvent, ProgressBuildEvent]


# Test execution events

@dataclass(frozen=True)
class TestOperationDescriptor:
    __test__ = False

    display_name: str
    event_time: int
    suite_name: Optional[str] = None
    class_name: Optional[str] = None
    method_name: Optional[str] = None


@dataclass(frozen=True)
class FailureRecord:
    message: Optional[str]
    description: Optional[str]
    causes: Tuple["FailureRecord", ...] = ()


@dataclass(frozen=True)
class AssertionFailureRecord(FailureRecord):
    expected_text: str = ""
    actual_text: str = ""


@dataclass(frozen=True)
class TestSuccessResult:
    __test__ = False

    start_time: int
    end_time: int
    up_to_date: bool = False


@dataclass(frozen=True)
class TestFailureResult:
    __test__ = False

    start_time: int
    end_time: int
    failures: Tuple[FailureRecord, ...] = ()


@dataclass(frozen=True)
class TestSkippedResult:
    __test__ = False

    start_time: int
    end_time: int


TestOperationResult = Union[TestSuccessResult, TestFailureResult, TestSkippedResult]


@dataclass(frozen=True)
class ExecutionStartEvent:
    event_id: str
    parent_event_id: Optional[str]
    descriptor: TestOperationDescriptor


@dataclass(frozen=True)
class ExecutionFinishEvent:
    event_id: str
    parent_event_id: Optional[str]
    descriptor: TestOperationDescriptor
    result: TestOperationResult


@dataclass(frozen=True)
class ExecutionMessageEvent:
    event_id: str
    parent_event_id: Optional[str]
    descriptor: TestOperationDescriptor
    is_std_out: bool
    message: str
    description: str


ExecutionEvent = Union[ExecutionStartEvent, ExecutionFinishEvent, ExecutionMessageEvent]


# Notifications handed back to the host

@dataclass(frozen=True)
class TaskNotificationEvent:
    task_id: Any
    description: str


@dataclass(frozen=True)
class BuildNotificationEvent(TaskNotificationEvent):
    build_event: Optional[BuildEvent] = None

    @classmethod
    def of(cls, task_id: Any, build_event: BuildEvent) -> "BuildNotificationEvent":
        return cls(task_id=task_id, description=build_event.message, build_event=build_event)


@dataclass(frozen=True)
class TaskExecutionNotificationEvent(TaskNotificationEvent):
    execution_event: Optional[ExecutionEvent] = None

    @classmethod
    def of(cls, task_id: Any, execution_event: ExecutionEvent) -> "TaskExecutionNotificationEvent":
        return cls(
            task_id=task_id,
            description=execution_event.descriptor.display_name,
            execution_event=execution_event,
        )


Notification = Union[TaskNotificationEvent, BuildNotificationEvent, TaskExecutionNotificationEvent]
