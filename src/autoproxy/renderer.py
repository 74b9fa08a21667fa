from __future__ import annotations

from .models import CertificateBundle, RoutingRecord

UPSTREAM_PORT = 80


def http_server_names(routing: RoutingRecord, base_domain: str) -> list[str]:
    names: list[str] = []
    for name in [*routing.server_names, f"{routing.upstream_target}.{base_domain}"]:
        if name not in names:
            names.append(name)
    return names


def _proxy_location(upstream: str) -> list[str]:
    return [
        "  location / {",
        f"    proxy_pass http://{upstream}:{UPSTREAM_PORT};",
        "    proxy_set_header Host $host;",
        "    proxy_set_header X-Real-IP $remote_addr;",
        "    proxy_set_header X-Forwarded-For $proxy_add_x_forwarded_for;",
        "    proxy_set_header X-Forwarded-Proto $scheme;",
        "  }",
    ]


def _https_block(routing: RoutingRecord, tls: CertificateBundle) -> list[str]:
    return [
        "server {",
        "  listen 443 ssl;",
        f"  server_name {tls.hostname};",
        f"  ssl_certificate {tls.certificate_path};",
        f"  ssl_certificate_key {tls.key_path};",
        *_proxy_location(routing.upstream_target),
        "}",
    ]


def _http_block(routing: RoutingRecord, base_domain: str) -> list[str]:
    lines = [
        "server {",
        "  listen 80;",
        f"  server_name {' '.join(http_server_names(routing, base_domain))};",
    ]
    if routing.tls is not None:
        lines += [
            f"  if ($host = {routing.tls.hostname}) {{",
            "    return 301 https://$host$request_uri;",
            "  }",
        ]
    lines += _proxy_location(routing.upstream_target)
    lines.append("}")
    return lines


def render_config(routing: RoutingRecord, base_domain: str) -> str:
    """Render the nginx config for one routing record. Pure function."""
    blocks: list[list[str]] = []
    if routing.tls is not None:
        blocks.append(_https_block(routing, routing.tls))
    blocks.append(_http_block(routing, base_domain))
    return "\n".join("\n".join(block) + "\n" for block in blocks)
