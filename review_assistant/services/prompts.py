"""
Prompt Templates - Text sent to the LLM for reviews and chat.

Two conventions matter to the response parser:
- Review prompts ask for OVERVIEW:/ANALYSIS:/CHANGES:/RISKS: sections.
- Chat prompts ask for proposed code between CODE_START and CODE_END.
"""

from review_assistant.services.response_parser import CODE_END, CODE_START


ANALYSIS_PROMPT_TEMPLATE = """You are a senior software engineer performing a careful code review.
You are looking at the file: {file_path}

Context:
- Language/Framework: {language}
- This is production code that needs to be handled with care
- Only suggest changes that are clearly improvements
- Preserve existing functionality and coding style

Current code:
```{language}
{content}
```

Please analyze this code and provide:
1. Brief overview of what the code does
2. Potential issues or improvements, if any, considering:
   - Code quality and maintainability
   - Performance optimizations
   - Security concerns
   - Best practices
3. Specific code changes, if needed, with:
   - Clear explanation of why each change is necessary
   - The exact location of the change
   - Before/after code snippets
   - Potential risks or side effects

If no significant improvements are needed, say so - don't suggest changes just for the sake of it.

Format your response as:
OVERVIEW: Brief description of the code
ANALYSIS: Detailed review points
CHANGES: Specific code modifications (if any)
RISKS: Potential risks to consider
"""


CHAT_PROMPT_TEMPLATE = """You are a helpful AI assistant reviewing code. You're looking at the file: {file_path}

Current code:
```
{content}
```

User question/request: {message}

Please provide a helpful response. If the user requests code changes:
1. Clearly explain what changes you'll make and why
2. Show the exact lines to modify
3. Provide the updated code
4. Mention any potential risks or considerations

If you're suggesting code changes, format them clearly between {code_start} and {code_end} markers.
Put the complete updated file between the markers, each marker on its own line."""


BATCH_PROMPT_TEMPLATE = """Analyze and improve this code file {file_path}:
{content}

Provide specific improvements with explanations."""


def language_hint(file_path: str) -> str:
    """Lower-cased extension of the file, or an empty string."""
    name = file_path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def build_analysis_prompt(file_path: str, content: str) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        file_path=file_path,
        language=language_hint(file_path),
        content=content,
    )


def build_chat_prompt(file_path: str, content: str, message: str) -> str:
    return CHAT_PROMPT_TEMPLATE.format(
        file_path=file_path,
        content=content,
        message=message,
        code_start=CODE_START,
        code_end=CODE_END,
    )


def build_batch_prompt(file_path: str, content: str) -> str:
    return BATCH_PROMPT_TEMPLATE.format(file_path=file_path, content=content)
