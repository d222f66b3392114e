"""docker-compose document builder."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import yaml

from ..models import Analysis, NODE_TYPES, ProjectType
from .common import (
    DATABASE_URLS,
    health_path_for,
    profile_for,
    resolve_database,
    service_name,
)

HEALTHCHECK_TIMINGS: Dict[str, Any] = {
    "interval": "30s",
    "timeout": "10s",
    "retries": 3,
    "start_period": "40s",
}


def database_service(kind: str) -> Dict[str, Any]:
    """Return the compose service definition for a bundled database."""
    if kind == "mysql":
        return {
            "image": "mysql:8.0",
            "environment": {
                "MYSQL_DATABASE": "app",
                "MYSQL_USER": "appuser",
                "MYSQL_PASSWORD": "${MYSQL_PASSWORD:-apppassword}",
                "MYSQL_ROOT_PASSWORD": "${MYSQL_ROOT_PASSWORD:-rootpassword}",
            },
            "ports": ["3306:3306"],
            "volumes": ["mysql_data:/var/lib/mysql"],
            "restart": "unless-stopped",
            "healthcheck": {
                "test": ["CMD", "mysqladmin", "ping", "-h", "localhost"],
                "interval": "10s",
                "timeout": "5s",
                "retries": 5,
            },
        }
    if kind == "mongodb":
        return {
            "image": "mongo:7",
            "environment": {
                "MONGO_INITDB_ROOT_USERNAME": "admin",
                "MONGO_INITDB_ROOT_PASSWORD": "${MONGO_PASSWORD:-password}",
            },
            "ports": ["27017:27017"],
            "volumes": ["mongodb_data:/data/db"],
            "restart": "unless-stopped",
            "healthcheck": {
                "test": ["CMD", "mongosh", "--quiet", "--eval", "db.adminCommand('ping')"],
                "interval": "10s",
                "timeout": "5s",
                "retries": 5,
            },
        }
    if kind == "redis":
        return {
            "image": "redis:7-alpine",
            "ports": ["6379:6379"],
            "volumes": ["redis_data:/data"],
            "restart": "unless-stopped",
            "healthcheck": {
                "test": ["CMD", "redis-cli", "ping"],
                "interval": "10s",
                "timeout": "5s",
                "retries": 5,
            },
        }
    return {
        "image": "postgres:15-alpine",
        "environment": {
            "POSTGRES_DB": "app",
            "POSTGRES_USER": "appuser",
            "POSTGRES_PASSWORD": "${POSTGRES_PASSWORD:-apppassword}",
        },
        "ports": ["5432:5432"],
        "volumes": ["postgres_data:/var/lib/postgresql/data"],
        "restart": "unless-stopped",
        "healthcheck": {
            "test": ["CMD-SHELL", "pg_isready -U appuser -d app"],
            "interval": "10s",
            "timeout": "5s",
            "retries": 5,
        },
    }


def database_volume(kind: str) -> str:
    return "postgres_data" if kind == "postgres" else f"{kind}_data"


def app_service(analysis: Analysis, database: Optional[str]) -> Dict[str, Any]:
    port = analysis.primary_port
    profile = profile_for(analysis)

    environment: List[str] = [f"{key}={value}" for key, value in profile.environment]
    environment.append(f"PORT={port}")
    if database:
        environment.append(f"DATABASE_URL={DATABASE_URLS[database]}")

    service: Dict[str, Any] = {
        "build": ".",
        "ports": [f"{port}:{port}"],
        "environment": environment,
    }
    if analysis.project_type in NODE_TYPES and analysis.project_type is not ProjectType.NEXTJS:
        service["volumes"] = [".:/app", "/app/node_modules"]
    if database:
        service["depends_on"] = {"db": {"condition": "service_healthy"}}
    service["restart"] = "unless-stopped"
    service["healthcheck"] = {
        "test": profile.health_test(port, health_path_for(analysis)),
        **HEALTHCHECK_TIMINGS,
    }
    return service


def compose_document(analysis: Analysis) -> Dict[str, Any]:
    """Build the compose mapping; keys keep insertion order when dumped."""
    database = resolve_database(analysis)
    services: Dict[str, Any] = {service_name(analysis): app_service(analysis, database)}
    document: Dict[str, Any] = {"services": services}
    if database:
        services["db"] = database_service(database)
        document["volumes"] = {database_volume(database): {}}
    document["networks"] = {"default": {"driver": "bridge"}}
    return document


def build_compose(analysis: Analysis) -> str:
    return yaml.safe_dump(
        compose_document(analysis),
        sort_keys=False,
        default_flow_style=False,
    )
