"""Scaffold generator: turns a document into the files of a runnable MCP server.

The generated project is a FastMCP server with one tool per operation.
Each tool validates its arguments with a pydantic `TypeAdapter` built from
the translated input schema, then forwards the call through an httpx
client module.
"""

import keyword
import logging
import re
from pprint import pformat

from pydantic import BaseModel

from spec_studio.generator.tools import InputField, Tool, extract_tools
from spec_studio.generator.validator import validate_files

logger = logging.getLogger(__name__)

DEFAULT_SERVER_NAME = "openapi-mcp-server"
DEFAULT_PORT = 3000
FALLBACK_BASE_URL = "https://api.example.com"
README_DESCRIPTION_LENGTH = 50
BANNER_TOOL_COUNT = 5


class ScaffoldOptions(BaseModel):
    server_name: str = DEFAULT_SERVER_NAME
    port: int = DEFAULT_PORT
    base_url: str | None = None


class ScaffoldGenerator:
    """Renders the generated file set for a list of tools."""

    def __init__(self, options: ScaffoldOptions | None = None):
        self.options = options or ScaffoldOptions()

    def _render_requirements(self) -> str:
        return '''fastmcp>=2.10
httpx>=0.27
pydantic[email]>=2.6
python-dotenv>=1.0
typing-extensions>=4.6
'''

    def _render_env_example(self, base_url: str | None) -> str:
        return f'''# Server configuration
PORT={self.options.port}

# API configuration
API_BASE_URL={base_url or FALLBACK_BASE_URL}

# Authentication
API_KEY=your-api-key-here
# API_AUTH_HEADER=Header-Name:header-value
'''

    def _render_http_client(self) -> str:
        return '''"""HTTP execution for the generated tools."""

import json
from urllib.parse import quote

import httpx

TIMEOUT = 30.0
BODY_METHODS = ("POST", "PUT", "PATCH")


def build_url(base_url: str, path_template: str, path_params: dict) -> str:
    """Substitute `{name}` placeholders with URL-encoded values."""
    path = path_template
    for key, value in path_params.items():
        path = path.replace("{" + key + "}", quote(str(value), safe=""))
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def execute_request(tool_config: dict, args: dict, config: dict | None = None) -> dict:
    """Run the HTTP request described by `tool_config` with validated `args`."""
    config = config or {}
    base_url = config.get("base_url") or tool_config.get("base_url")
    if not base_url:
        raise ValueError(f"No base URL configured for tool: {tool_config['name']}")

    path_params, query_params, header_params, cookies = {}, {}, {}, {}
    for param in tool_config.get("execution_parameters") or []:
        value = args.get(param["name"])
        if value is None:
            continue
        location = param["in"]
        if location == "path":
            path_params[param["name"]] = value
        elif location == "query":
            query_params[param["name"]] = value
        elif location == "header":
            header_params[param["name"]] = str(value)
        elif location == "cookie":
            cookies[param["name"]] = str(value)

    method = tool_config["method"].upper()
    headers = {"Accept": "application/json", **config.get("headers", {}), **header_params}
    request = {}

    body = args.get("requestBody")
    if body is not None:
        content_type = tool_config.get("request_body_content_type") or "application/json"
        headers["Content-Type"] = content_type
        if method in BODY_METHODS:
            if isinstance(body, str):
                request["content"] = body
            elif content_type == "application/x-www-form-urlencoded" and isinstance(body, dict):
                request["data"] = body
            else:
                request["content"] = json.dumps(body)

    url = build_url(base_url, tool_config["path_template"], path_params)
    with httpx.Client(timeout=TIMEOUT) as client:
        response = client.request(
            method, url, params=query_params, headers=headers, cookies=cookies, **request
        )

    data = response.text
    if "application/json" in response.headers.get("content-type", ""):
        try:
            data = response.json()
        except ValueError:
            pass

    return {
        "status": response.status_code,
        "reason": response.reason_phrase,
        "data": data,
        "ok": response.is_success,
    }
'''

    def _render_tools_config(self, tools: list[Tool]) -> str:
        configs = {tool.name: tool.config() for tool in tools}
        return (
            '"""Tool descriptors extracted from the OpenAPI document, keyed by tool name."""\n'
            "\n"
            f"TOOL_CONFIGS = {pformat(configs, sort_dicts=False)}\n"
        )

    def _render_server(self, tools: list[Tool], base_url: str | None) -> str:
        name = self.options.server_name
        lines = [
            f"# {_one_line(name)}: MCP server generated from an OpenAPI document ({len(tools)} tools).",
            "",
            "import json",
            "import os",
            "import sys",
            "from datetime import date, datetime",
            "from typing import Any, Literal, Optional, Union",
            "",
            "from dotenv import load_dotenv",
            "from fastmcp import FastMCP",
            "from pydantic import AnyUrl, EmailStr, Field, TypeAdapter",
            "from typing_extensions import Annotated, NotRequired, TypedDict",
            "",
            "from http_client import execute_request",
            "from tools_config import TOOL_CONFIGS",
            "",
            "load_dotenv()",
            "",
            f'PORT = int(os.getenv("PORT", "{self.options.port}"))',
            "",
            "API_CONFIG = {",
            f'    "base_url": os.getenv("API_BASE_URL") or {base_url!r},',
            '    "headers": {},',
            "}",
            'if os.getenv("API_KEY"):',
            '    API_CONFIG["headers"]["Authorization"] = f"Bearer {os.environ[\'API_KEY\']}"',
            'if os.getenv("API_AUTH_HEADER"):',
            '    _key, _, _value = os.environ["API_AUTH_HEADER"].partition(":")',
            "    if _key.strip() and _value.strip():",
            '        API_CONFIG["headers"][_key.strip()] = _value.strip()',
            "",
            f"mcp = FastMCP({name!r})",
            "",
            "",
            "def _run(tool_name: str, adapter: TypeAdapter, params: dict) -> str | dict[str, Any]:",
            "    params = {key: value for key, value in params.items() if value is not None}",
            "    args = adapter.dump_python(adapter.validate_python(params), mode=\"json\")",
            "    result = execute_request(TOOL_CONFIGS[tool_name], args, API_CONFIG)",
            "    data = result[\"data\"]",
            "    if not result[\"ok\"]:",
            "        detail = data if isinstance(data, str) else json.dumps(data, indent=2)",
            "        return f\"Error: {result['status']} {result['reason']}\\n{detail}\"",
            "    if isinstance(data, str):",
            "        return data",
            "    if isinstance(data, dict):",
            "        return data",
            "    return {\"result\": data}",
        ]

        used: set[str] = set()
        for tool in tools:
            ident = _identifier(tool.name, used)
            used.update((ident, f"{ident}_input", f"{ident}_adapter"))
            arguments = _arguments(tool.input_fields)
            call_args = ", ".join(f"{field.name!r}: {arg}" for arg, field in arguments)
            lines.extend([
                "",
                "",
                f"{ident}_input = {tool.input_schema}",
                f"{ident}_adapter = TypeAdapter({ident}_input)",
                "",
                "",
                f"@mcp.tool(name={tool.name!r}, description={tool.description!r})",
            ])
            if arguments:
                lines.append(f"def {ident}(")
                lines.extend(f"    {_argument(arg, field)}," for arg, field in arguments)
                lines.append(") -> str | dict[str, Any]:")
            else:
                lines.append(f"def {ident}() -> str | dict[str, Any]:")
            lines.append(f"    return _run({tool.name!r}, {ident}_adapter, {{{call_args}}})")

        banner = [f"{_one_line(name)} MCP server: {len(tools)} tools"]
        banner.extend(f"  - {t.name}" for t in tools[:BANNER_TOOL_COUNT])
        if len(tools) > BANNER_TOOL_COUNT:
            banner.append(f"  ... and {len(tools) - BANNER_TOOL_COUNT} more")
        lines.extend([
            "",
            "",
            'if __name__ == "__main__":',
            *[f"    print({line!r}, file=sys.stderr)" for line in banner],
            '    print(f"MCP endpoint: http://localhost:{PORT}/mcp", file=sys.stderr)',
            '    print(f"API base: {API_CONFIG[\'base_url\'] or \'not configured\'}", file=sys.stderr)',
            '    mcp.run(transport="http", host="0.0.0.0", port=PORT)',
        ])
        return "\n".join(lines) + "\n"

    def _render_readme(self, tools: list[Tool], base_url: str | None) -> str:
        name = self.options.server_name
        port = self.options.port
        rows = []
        for tool in tools:
            desc = tool.description[:README_DESCRIPTION_LENGTH]
            if len(tool.description) > README_DESCRIPTION_LENGTH:
                desc += "..."
            desc = _one_line(desc).replace("|", "\\|")
            rows.append(f"| `{tool.name}` | {tool.method.upper()} | {tool.path_template} | {desc} |")

        return f'''# {name}

MCP server generated from an OpenAPI document, built on [FastMCP](https://gofastmcp.com).
It exposes {len(tools)} tools, one per API operation.

## Quick start

```bash
pip install -r requirements.txt
cp .env.example .env   # then fill in your API credentials
python server.py
```

The server listens on http://localhost:{port}/mcp (streamable HTTP).

## Environment variables

| Variable | Description | Default |
|----------|-------------|---------|
| `PORT` | Server port | {port} |
| `API_BASE_URL` | Base URL for API requests | {base_url or "from the OpenAPI document"} |
| `API_KEY` | Bearer token sent as `Authorization` | - |
| `API_AUTH_HEADER` | Extra auth header, `Header-Name:value` | - |

## Connecting a client

```json
{{
  "mcpServers": {{
    "{name}": {{
      "url": "http://localhost:{port}/mcp"
    }}
  }}
}}
```

## Available tools

| Tool | Method | Path | Description |
|------|--------|------|-------------|
{chr(10).join(rows)}

## Project layout

```
server.py        FastMCP server and tool registrations
http_client.py   httpx request execution
tools_config.py  tool descriptors extracted from the OpenAPI document
```
'''

    def generate(self, doc: dict) -> dict[str, str]:
        """Generate all scaffold files.

        Returns dict of {filename: content}.
        """
        tools = extract_tools(doc, base_url=self.options.base_url)
        base_url = self.options.base_url or (tools[0].base_url if tools else None)

        files: dict[str, str] = {}
        files["requirements.txt"] = self._render_requirements()
        files[".env.example"] = self._render_env_example(base_url)
        files["http_client.py"] = self._render_http_client()
        files["tools_config.py"] = self._render_tools_config(tools)
        files["server.py"] = self._render_server(tools, base_url)
        files["README.md"] = self._render_readme(tools, base_url)

        errors = validate_files(files)
        for filename, error in errors.items():
            logger.error("Generated %s is invalid: %s", filename, error)

        logger.info("Generated %d files for %d tools", len(files), len(tools))
        return files


def generate_scaffold(doc: dict, options: ScaffoldOptions | None = None) -> dict[str, str]:
    return ScaffoldGenerator(options).generate(doc)


def _identifier(name: str, used: set[str]) -> str:
    """Module-level handler name for a tool, clear of every name in `used`.

    The `tool_` prefix keeps handlers and their `_input`/`_adapter`
    companions clear of builtins and of the names server.py imports.
    """
    ident = "tool_" + re.sub(r"\W", "_", name)
    candidate = ident
    suffix = 2
    while {candidate, f"{candidate}_input", f"{candidate}_adapter"} & used:
        candidate = f"{ident}_{suffix}"
        suffix += 1
    return candidate


def _arguments(fields: list[InputField]) -> list[tuple[str, InputField]]:
    """(Python parameter name, field) pairs, required fields first."""
    used: set[str] = set()
    arguments = []
    for field in sorted(fields, key=lambda f: not f.required):
        arg = re.sub(r"\W", "_", field.name)
        if not arg or arg[0].isdigit() or keyword.iskeyword(arg) or arg.startswith(("_", "tool_")):
            arg = f"arg_{arg}"
        candidate = arg
        suffix = 2
        while candidate in used:
            candidate = f"{arg}_{suffix}"
            suffix += 1
        used.add(candidate)
        arguments.append((candidate, field))
    return arguments


def _argument(arg: str, field: InputField) -> str:
    """One parameter of a handler signature; renamed parameters keep the field name as alias."""
    metadata = []
    if field.description:
        metadata.append(f"description={field.description!r}")
    if arg != field.name:
        metadata.append(f"alias={field.name!r}")

    annotation = field.type_expr if field.required else f"Optional[{field.type_expr}]"
    if metadata:
        annotation = f"Annotated[{annotation}, Field({', '.join(metadata)})]"
    if field.required:
        return f"{arg}: {annotation}"
    return f"{arg}: {annotation} = None"


def _one_line(text: str) -> str:
    return " ".join(str(text).split())
