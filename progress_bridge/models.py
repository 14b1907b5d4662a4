from __future__ import annotations

from enum import Enum
from typing import Annotated, ClassVar, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, model_validator


# Descriptors

class OperationDescriptor(BaseModel):
    kind: Literal["operation"] = "operation"
    name: str
    display_name: str
    parent: Optional[Descriptor] = None


class TaskOperationDescriptor(OperationDescriptor):
    kind: Literal["task"] = "task"
    task_path: str = ""


class TestOperationDescriptor(OperationDescriptor):
    __test__ = False

    kind: Literal["test"] = "test"


class JvmTestKind(str, Enum):
    SUITE = "SUITE"
    ATOMIC = "ATOMIC"
    UNKNOWN = "UNKNOWN"


class JvmTestOperationDescriptor(TestOperationDescriptor):
    kind: Literal["jvm_test"] = "jvm_test"
    jvm_test_kind: JvmTestKind = JvmTestKind.UNKNOWN
    suite_name: Optional[str] = None
    class_name: Optional[str] = None
    method_name: Optional[str] = None


class Destination(str, Enum):
    STD_OUT = "StdOut"
    STD_ERR = "StdErr"


class TestOutputDescriptor(OperationDescriptor):
    __test__ = False

    kind: Literal["test_output"] = "test_output"
    destination: Destination = Destination.STD_OUT
    message: str = ""


Descriptor = Annotated[
    Union[
        OperationDescriptor,
        TaskOperationDescriptor,
        TestOperationDescriptor,
        JvmTestOperationDescriptor,
        TestOutputDescriptor,
    ],
    Field(discriminator="kind"),
]


# Failures

class Failure(BaseModel):
    kind: Literal["failure"] = "failure"
    message: Optional[str] = None
    description: Optional[str] = None
    causes: List[FailureType] = []


class TestAssertionFailure(Failure):
    __test__ = False

    kind: Literal["assertion"] = "assertion"
    expected: Optional[str] = None
    actual: Optional[str] = None


FailureType = Annotated[Union[Failure, TestAssertionFailure], Field(discriminator="kind")]


# Operation results

class OperationResult(BaseModel):
    kind: str
    start_time: int = 0
    end_time: int = 0


class SuccessResult(OperationResult):
    kind: Literal["success"] = "success"


class FailureResult(OperationResult):
    kind: Literal["failure"] = "failure"
    failures: List[FailureType] = []


class SkippedResult(OperationResult):
    kind: Literal["skipped"] = "skipped"


class TaskSuccessResult(SuccessResult):
    kind: Literal["task_success"] = "task_success"
    up_to_date: bool = False
    from_cache: bool = False


class TaskFailureResult(FailureResult):
    kind: Literal["task_failure"] = "task_failure"


class TaskSkippedResult(SkippedResult):
    kind: Literal["task_skipped"] = "task_skipped"
    skip_message: str = ""


class TestSuccessResult(SuccessResult):
    __test__ = False

    kind: Literal["test_success"] = "test_success"


class TestFailureResult(FailureResult):
    __test__ = False

    kind: Literal["test_failure"] = "test_failure"


class TestSkippedResult(SkippedResult):
    __test__ = False

    kind: Literal["test_skipped"] = "test_skipped"


ResultType = Annotated[
    Union[
        SuccessResult,
        FailureResult,
        SkippedResult,
        TaskSuccessResult,
        TaskFailureResult,
        TaskSkippedResult,
        TestSuccessResult,
        TestFailureResult,
        TestSkippedResult,
    ],
    Field(discriminator="kind"),
]


# Progress events

class ProgressEvent(BaseModel):
    """
    A point-in-time notification from the build tool.
    When display_name is omitted it is derived from the descriptor,
    e.g. "Task :app:compileJava started".
    """
    phase: ClassVar[str] = ""

    kind: str
    event_time: int = 0
    display_name: str = ""
    descriptor: Descriptor

    @model_validator(mode="after")
    def _default_display_name(self) -> "ProgressEvent":
        if not self.display_name:
            base = self.descriptor.display_name
            self.display_name = f"{base} {self.phase}" if self.phase else base
        return self


class StartEvent(ProgressEvent):
    phase: ClassVar[str] = "started"

    kind: Literal["start"] = "start"


class FinishEvent(ProgressEvent):
    phase: ClassVar[str] = "finished"

    kind: Literal["finish"] = "finish"
    result: ResultType


class StatusEvent(ProgressEvent):
    kind: Literal["status"] = "status"
    total: int = -1
    progress: int = -1
    unit: str = ""


class TaskProgressEvent(ProgressEvent):
    pass


class TaskStartEvent(TaskProgressEvent):
    phase: ClassVar[str] = "started"

    kind: Literal["task_start"] = "task_start"


class TaskFinishEvent(TaskProgressEvent):
    phase: ClassVar[str] = "finished"

    kind: Literal["task_finish"] = "task_finish"
    result: ResultType


class TaskStatusEvent(TaskProgressEvent, StatusEvent):
    kind: Literal["task_status"] = "task_status"


class TestProgressEvent(ProgressEvent):
    __test__ = False


class TestStartEvent(TestProgressEvent):
    phase: ClassVar[str] = "started"

    kind: Literal["test_start"] = "test_start"


class TestFinishEvent(TestProgressEvent):
    phase: ClassVar[str] = "finished"

    kind: Literal["test_finish"] = "test_finish"
    result: ResultType


class TestOutputEvent(TestProgressEvent):
    kind: Literal["test_output"] = "test_output"
    descriptor: TestOutputDescriptor


EventType = Annotated[
    Union[
        StartEvent,
        FinishEvent,
        StatusEvent,
        TaskStartEvent,
        TaskFinishEvent,
        TaskStatusEvent,
        TestStartEvent,
        TestFinishEvent,
        TestOutputEvent,
    ],
    Field(discriminator="kind"),
]

for _model in (
    OperationDescriptor,
    TaskOperationDescriptor,
    TestOperationDescriptor,
    JvmTestOperationDescriptor,
    TestOutputDescriptor,
    Failure,
    TestAssertionFailure,
    FailureResult,
    TaskFailureResult,
    TestFailureResult,
    ProgressEvent,
    StartEvent,
    FinishEvent,
    StatusEvent,
    TaskProgressEvent,
    TaskStartEvent,
    TaskFinishEvent,
    TaskStatusEvent,
    TestProgressEvent,
    TestStartEvent,
    TestFinishEvent,
    TestOutputEvent,
):
    _model.model_rebuild()

EVENT_ADAPTER: TypeAdapter = TypeAdapter(EventType)
