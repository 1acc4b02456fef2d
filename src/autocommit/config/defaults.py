"""Default system prompt and starter config.toml template."""

DEFAULT_PROVIDER = "groq"

DEFAULT_SYSTEM_PROMPT = """\
You are a commit message generator. Analyze the git diff and create ONLY a conventional commit message.
Follow these rules:
    - Use format for the first line: <type>(<scope>): <subject>
    - Types: feat, fix, docs, style, refactor, test, chore
    - Scope is optional - omit if not needed
    - First line (subject) should be a concise summary
    - Use present tense, imperative mood
    - Add a blank line after the subject if you need a body
    - Body should explain the "highlights" of complex or multiple changes
    - Use bullet points (-) in the body for multiple distinct changes, keep concise
    - CRITICAL: Return ONLY the commit message itself
    - NO suggestions, notes, or commentary after the commit message
    - NO text like "Additionally...", "Note:", "Also...", or similar
    - Do not use markdown code blocks

Examples (single line for simple changes):
    - feat(auth): add password validation to login form
    - docs(readme): update installation instructions
    - feat: add new feature without scope

Example (with body for complex changes):
    feat(api): implement rate limiting middleware

     - Add sliding window rate limiting with Redis backend
     - Configurable limits per endpoint via env vars
"""

_HEADER = """\
# autocommit configuration
# Run `autocommit config edit` to change it, `autocommit config show` to inspect it.

default_provider = "{default_provider}"

# Stage every change without asking / push after committing without asking.
auto_add = false
auto_push = false

# Answer to "Push to remote?" when stdin is closed (e.g. piped input).
push_on_eof = true

# Leave empty to use the built-in prompt.
system_prompt = \"\"\"
{system_prompt}\"\"\"

"""

_PROVIDER_BLOCK = """\
[[providers]]
name = "{name}"
api_key = "{api_key}"
model = "{model}"
endpoint = "{endpoint}"

"""


def render_default_toml(default_provider: str = DEFAULT_PROVIDER) -> str:
    """Build the starter config with one ``[[providers]]`` table per built-in."""
    from autocommit.providers import BUILTIN_PROVIDERS

    parts = [
        _HEADER.format(
            default_provider=default_provider,
            system_prompt=DEFAULT_SYSTEM_PROMPT,
        )
    ]
    for provider in BUILTIN_PROVIDERS:
        parts.append(
            _PROVIDER_BLOCK.format(
                name=provider.name,
                api_key=provider.api_key_placeholder,
                model=provider.default_model,
                endpoint=provider.default_endpoint,
            )
        )
    return "".join(parts)
