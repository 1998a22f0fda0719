"""JSON-Patch (RFC 6902) 应用

将 PATCH 请求体作用于 Task 当前表示，返回校验后的可写字段。
"""

from typing import Any

import jsonpatch
import jsonpointer
from pydantic import ValidationError

from .exceptions import ImmutableFieldError, TaskPatchError
from .models.resource import PatchedTask, TaskResource

# 不允许通过 PATCH 修改的字段
IMMUTABLE_FIELDS: tuple[str, ...] = ("guid",)


def apply_task_patch(
    resource: TaskResource,
    operations: list[dict[str, Any]],
) -> PatchedTask:
    """对 resource 应用 JSON-Patch

    Args:
        resource: Task 当前表示（需已填充 groups / tags）
        operations: JSON-Patch 操作列表

    Returns:
        校验后的 PatchedTask

    Raises:
        ImmutableFieldError: 修改了 guid
        TaskPatchError: 文档非法、操作失败或结果校验失败
    """
    document = resource.patch_document()
    try:
        patch = jsonpatch.JsonPatch(operations)
        patched = patch.apply(document)
    except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException) as e:
        raise TaskPatchError(f"Cannot apply patch: {e}") from e

    if not isinstance(patched, dict):
        raise TaskPatchError("Patched document must be a JSON object")

    for field in IMMUTABLE_FIELDS:
        if patched.get(field) != document[field]:
            raise ImmutableFieldError(field)

    try:
        return PatchedTask.model_validate(patched)
    except ValidationError as e:
        raise TaskPatchError(f"Patched task is invalid: {e.error_count()} error(s)") from e
