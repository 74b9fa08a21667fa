from __future__ import annotations

from pathlib import Path

from autoproxy.models import CertificateBundle, RoutingRecord
from autoproxy.renderer import http_server_names, render_config


def test_http_only_block_without_tls() -> None:
    routing = RoutingRecord(config_key="abc", upstream_target="app", server_names=["app1.test.local"])
    content = render_config(routing, "test.local")
    assert content == (
        "server {\n"
        "  listen 80;\n"
        "  server_name app1.test.local app.test.local;\n"
        "  location / {\n"
        "    proxy_pass http://app:80;\n"
        "    proxy_set_header Host $host;\n"
        "    proxy_set_header X-Real-IP $remote_addr;\n"
        "    proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;\n"
        "    proxy_set_header X-Forwarded-Proto $scheme;\n"
        "  }\n"
        "}\n"
    )
    assert "listen 443" not in content
    assert "return 301" not in content


def test_https_block_precedes_http_block() -> None:
    bundle = CertificateBundle(hostname="x.com", directory=Path("/etc/ssl/x.com"))
    routing = RoutingRecord(config_key="abc", upstream_target="app", server_names=["y.com", "x.com"], tls=bundle)
    content = render_config(routing, "example.com")

    https_at = content.index("listen 443 ssl;")
    http_at = content.index("listen 80;")
    assert https_at < http_at
    assert "  ssl_certificate /etc/ssl/x.com/fullchain.pem;\n" in content
    assert "  ssl_certificate_key /etc/ssl/x.com/privkey.pem;\n" in content
    assert "  server_name x.com;\n" in content
    assert "  server_name y.com x.com app.example.com;\n" in content
    assert "  if ($host = x.com) {\n    return 301 https://$host$request_uri;\n  }\n" in content
    assert content.count("proxy_pass http://app:80;") == 2


def test_canonical_name_listed_once_and_last() -> None:
    routing = RoutingRecord(
        config_key="abc",
        upstream_target="app",
        server_names=["app.example.com", "x.com"],
    )
    assert http_server_names(routing, "example.com") == ["app.example.com", "x.com"]


def test_render_is_pure() -> None:
    routing = RoutingRecord(config_key="abc", upstream_target="app", server_names=["x.com"])
    assert render_config(routing, "example.com") == render_config(routing, "example.com")
    assert routing.server_names == ["x.com"]
