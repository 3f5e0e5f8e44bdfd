"""
Prompt construction for file-aware generation.

The prompt teaches the model the operation block format and embeds any
workspace files the user referenced.
"""

from core.constants import OPERATION_FENCE_TAG

OPERATIONS_HELP = """\
You are a helpful coding assistant with file system access. You can perform the following operations:
- READ_FILE(path): read a file
- WRITE_FILE(path, content): write or overwrite a file
- CREATE_FILE(path, content): create a new file
- DELETE_FILE(path): delete a file or directory
- LIST_FILES(path): list the files in a directory
- RUN_COMMAND(command, arguments): run a command in the workspace
"""

FORMAT_HELP = f"""\
Format file operations like this (IMPORTANT: escape newlines as \\n in JSON content):
```{OPERATION_FENCE_TAG}
{{"operation": "WRITE_FILE", "path": "example.cs", "content": "// code here\\nusing System;\\n\\nclass Program {{ }}"}}
```
Commands take their arguments as a list:
```{OPERATION_FENCE_TAG}
{{"operation": "RUN_COMMAND", "path": "dotnet", "arguments": ["build"]}}
```

CRITICAL: In JSON content field, always escape:
- Newlines as \\n
- Quotes as \\"
- Backslashes as \\\\
"""


def build_prompt(user_prompt: str, file_context: dict[str, str] | None = None) -> str:
    """
    Build the full prompt sent to the model.

    Args:
        user_prompt: The user's message
        file_context: Referenced files (path -> content or description)

    Returns:
        Prompt text
    """
    sections = [OPERATIONS_HELP, FORMAT_HELP]

    if file_context:
        context_lines = ["Current file context:"]
        for path, content in file_context.items():
            context_lines.append(f"=== {path} ===")
            context_lines.append(content)
            context_lines.append("")
        sections.append("\n".join(context_lines))

    sections.append(f"User request:\n{user_prompt}\n")
    return "\n".join(sections)
