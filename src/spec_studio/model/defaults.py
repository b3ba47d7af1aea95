"""Factories for the objects the editor inserts on "add" commands.

Every factory returns a fresh object so callers may mutate the result.
"""

from spec_studio.normalize import clone, pre_process

DEFAULT_OPENAPI_VERSION = "3.0.3"


def create_empty_spec() -> dict:
    """A fresh, canonical document with no paths."""
    return pre_process({
        "openapi": DEFAULT_OPENAPI_VERSION,
        "info": {
            "title": "New API",
            "version": "1.0.0",
            "description": "",
        },
        "paths": {},
    })


def create_demo_spec() -> dict:
    """A canonical copy of the petstore demo document."""
    return pre_process(clone(PETSTORE_SPEC))


def default_operation() -> dict:
    return {
        "summary": "",
        "description": "",
        "operationId": "",
        "parameters": [],
        "responses": {
            "200": {"description": "Successful response"},
        },
        "tags": [],
        "externalDocs": {},
    }


def default_parameter() -> dict:
    return {
        "name": "newParam",
        "in": "query",
        "required": False,
        "schema": {"type": "string"},
    }


def default_response() -> dict:
    return {"description": "Response description"}


def fallback_response() -> dict:
    """Installed when the last documented response of an operation is removed."""
    return {"description": "Default response"}


def default_request_body() -> dict:
    return {
        "required": False,
        "content": {
            "application/json": {"schema": {}},
        },
    }


def default_media_type() -> dict:
    return {"schema": {}}


def default_server() -> dict:
    return {"url": "https://api.example.com", "description": ""}


def default_server_variable() -> dict:
    return {"default": "change-me", "description": ""}


def default_tag() -> dict:
    return {"name": "newTag", "description": "", "externalDocs": {}}


def default_security_scheme() -> dict:
    return {"type": "apiKey", "name": "api_key", "in": "query"}


def default_security_scheme_of_type(scheme_type: str, description: str | None = None) -> dict:
    """A scheme of the given type carrying only the fields that type uses."""
    scheme: dict = {"type": scheme_type}
    if description:
        scheme["description"] = description
    if scheme_type == "apiKey":
        scheme["name"] = "api_key"
        scheme["in"] = "query"
    elif scheme_type == "http":
        scheme["scheme"] = "bearer"
    elif scheme_type == "oauth2":
        scheme["flows"] = {}
    elif scheme_type == "openIdConnect":
        scheme["openIdConnectUrl"] = ""
    return scheme


def default_oauth_flow() -> dict:
    return {"scopes": {}}


def default_callback() -> dict:
    return {"{$url}": {}}


def default_schema() -> dict:
    return {"type": "object"}


PETSTORE_SPEC = {
    "openapi": DEFAULT_OPENAPI_VERSION,
    "info": {
        "title": "Petstore API",
        "version": "1.0.0",
        "description": "A sample Pet Store API",
        "contact": {
            "name": "API Support",
            "email": "support@example.com",
        },
        "license": {
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
    },
    "servers": [
        {
            "url": "https://api.petstore.example.com/v1",
            "description": "Production server",
        },
    ],
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "description": "Returns a list of all pets in the store",
                "tags": ["pets"],
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "description": "Maximum number of pets to return",
                        "required": False,
                        "schema": {"type": "integer", "format": "int32"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "A list of pets",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                },
                            },
                        },
                    },
                },
            },
            "post": {
                "operationId": "createPet",
                "summary": "Create a pet",
                "description": "Creates a new pet in the store",
                "tags": ["pets"],
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Pet"},
                        },
                    },
                },
                "responses": {
                    "201": {"description": "Pet created successfully"},
                },
            },
        },
        "/pets/{petId}": {
            "get": {
                "operationId": "getPet",
                "summary": "Get a pet by ID",
                "tags": ["pets"],
                "parameters": [
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "description": "The ID of the pet",
                        "schema": {"type": "string"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "A pet",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                            },
                        },
                    },
                    "404": {"description": "Pet not found"},
                },
            },
            "delete": {
                "operationId": "deletePet",
                "summary": "Delete a pet",
                "tags": ["pets"],
                "parameters": [
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    },
                ],
                "responses": {
                    "204": {"description": "Pet deleted successfully"},
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "tag": {"type": "string"},
                    "status": {
                        "type": "string",
                        "enum": ["available", "pending", "sold"],
                    },
                },
            },
        },
        "securitySchemes": {
            "api_key": {
                "type": "apiKey",
                "name": "X-API-Key",
                "in": "header",
            },
        },
    },
    "tags": [
        {"name": "pets", "description": "Pet operations"},
    ],
}
