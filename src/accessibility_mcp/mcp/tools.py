"""MCP tool definitions for the three accessibility engines."""

_URL_PROPERTY = {
    "type": "string",
    "description": "The URL to audit (http://, https://), local file path (./file.html), or file:// URL",
}

_TIMEOUT_PROPERTY = {"type": "number", "description": "Timeout in milliseconds"}

TOOL_DEFINITIONS = [
    {
        "name": "axe_audit",
        "description": "Run an accessibility audit using axe-core via Playwright. Supports URLs, local file paths, and localhost URLs.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": _URL_PROPERTY,
                "options": {
                    "type": "object",
                    "description": "Optional axe-core configuration",
                    "properties": {
                        "tags": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": 'WCAG tags to include (e.g., ["wcag2a", "wcag2aa"])',
                        },
                        "rules": {
                            "type": "object",
                            "description": 'Per-rule toggles, e.g. {"color-contrast": {"enabled": false}}',
                            "additionalProperties": {
                                "type": "object",
                                "properties": {"enabled": {"type": "boolean"}},
                            },
                        },
                        "timeout": _TIMEOUT_PROPERTY,
                        "browser": {
                            "type": "string",
                            "enum": ["chromium", "firefox", "webkit"],
                            "description": "Browser to use (default: chromium)",
                        },
                    },
                },
            },
            "required": ["url"],
        },
    },
    {
        "name": "lighthouse_audit",
        "description": "Run an accessibility audit using the Lighthouse CLI. Supports URLs, local file paths, and localhost URLs.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": _URL_PROPERTY,
                "categories": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Lighthouse categories to include (default: accessibility)",
                },
                "options": {
                    "type": "object",
                    "description": "Optional Lighthouse configuration",
                    "properties": {
                        "onlyCategories": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Categories to include; takes precedence over categories",
                        },
                        "skipAudits": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Audits to skip",
                        },
                        "timeout": _TIMEOUT_PROPERTY,
                    },
                },
            },
            "required": ["url"],
        },
    },
    {
        "name": "wave_audit",
        "description": "Run an accessibility audit using the WAVE API (requires WAVE_API_KEY). Supports URLs and localhost URLs. Local files are served via a temporary local server.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": "The URL to audit (http://, https://), local file path (./file.html), or localhost URL. Local files are served via a temporary server.",
                },
                "apiKey": {
                    "type": "string",
                    "description": "WAVE API key (optional, uses WAVE_API_KEY env var if not provided)",
                },
                "options": {
                    "type": "object",
                    "description": "Optional WAVE configuration",
                    "properties": {
                        "apiUrl": {"type": "string", "description": "WAVE API endpoint override"},
                        "timeout": _TIMEOUT_PROPERTY,
                    },
                },
            },
            "required": ["url"],
        },
    },
]
