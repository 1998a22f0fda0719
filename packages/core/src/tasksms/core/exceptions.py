"""tasksms 异常体系

每个异常携带 HTTP 状态码和错误码，由 gateway 统一映射为错误响应。
"""

from uuid import UUID


class TaskServiceError(Exception):
    """tasksms 基础异常"""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskNotFoundError(TaskServiceError):
    """guid 对应的 Task 不存在"""

    status_code = 404
    code = "TASK_NOT_FOUND"

    def __init__(self, guid: UUID | str) -> None:
        super().__init__(f"Task with guid {guid} does not exist")
        self.guid = str(guid)


class TaskPatchError(TaskServiceError):
    """JSON-Patch 无法应用或应用结果不合法

    包括：文档格式错误、路径不存在、test 操作失败、结果校验失败。
    """

    status_code = 422
    code = "INVALID_PATCH"


class ImmutableFieldError(TaskPatchError):
    """JSON-Patch 试图修改不可变字段（guid）"""

    code = "IMMUTABLE_FIELD"

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is immutable")
        self.field = field
