"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8080"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class SupabaseConfig(BaseModel):
    """Hosted platform (Supabase) connection configuration.

    ``anon_key`` is the public key used for every customer-facing call.
    ``service_role_key`` bypasses row level security and is only handed to the
    customer provisioning endpoint.
    """

    url: str = Field(default="", description="Project URL, e.g. https://xyz.supabase.co")
    anon_key: str = Field(default="", description="Public (anon) API key")
    service_role_key: str = Field(
        default="", description="Elevated service-role key (server only)"
    )
    timeout_seconds: float = Field(
        default=10.0, description="Timeout for each platform request"
    )
    enable_provisioning: bool = Field(
        default=True,
        description="Expose /api/create-customer; requires service_role_key",
    )

    @field_validator("url", "anon_key", "service_role_key", mode="before")
    @classmethod
    def _unset_as_empty(cls, value: str | None) -> str:
        # An empty placeholder substitutes to YAML null
        return "" if value is None else value

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class CatalogConfig(BaseModel):
    """Product catalog configuration."""

    products_table: str = Field(default="products", description="Products table")
    default_limit: int = Field(
        default=20, ge=1, description="Rows requested when no limit is given"
    )
    max_limit: int = Field(default=100, ge=1, description="Largest accepted limit")


class CustomersConfig(BaseModel):
    """Customer account configuration."""

    table: str = Field(default="customers", description="Customer profile table")
    role: str = Field(
        default="customer", description="Role tag attached to new accounts"
    )
    login_route: str = Field(
        default="/customer/login", description="Client route for the sign-in screen"
    )
    dashboard_tabs: list[str] = Field(
        default_factory=lambda: ["browse", "cart", "reviews"],
        description="Tabs the dashboard accepts in its ?tab= parameter",
    )
    default_tab: str = Field(default="browse", description="Fallback dashboard tab")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="", description="Log file path (empty disables)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @field_validator("file", mode="before")
    @classmethod
    def _unset_as_empty(cls, value: str | None) -> str:
        return "" if value is None else value


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_max_age: int = Field(
        default=3600, description="Session maximum age in seconds"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class SecurityConfig(BaseModel):
    """Security configuration for customer sessions."""

    session_cookie_name: str = Field(
        default="customer_session_id", description="Name of the session cookie"
    )
    secure_cookies: bool = Field(
        default=True, description="Force secure cookies in production"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax", description="SameSite cookie attribute"
    )
    enable_client_fingerprinting: bool = Field(
        default=True, description="Bind sessions to the client's user agent and IP"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    supabase: SupabaseConfig = Field(
        default_factory=SupabaseConfig, description="Hosted platform configuration"
    )
    catalog: CatalogConfig = Field(
        default_factory=CatalogConfig, description="Catalog configuration"
    )
    customers: CustomersConfig = Field(
        default_factory=CustomersConfig, description="Customer configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
