"""Shared constants for supahost."""

from pathlib import Path

# Inventory defaults
DEFAULT_INVENTORY_FILE = Path("servers.json")
DEFAULT_CERTBOT_EMAIL = "default@example.com"
DEFAULT_SUPABASE_PATH = "/opt/supabase_instance"

# SSH
SSH_CONNECT_TIMEOUT = 30.0

# Templates
TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
SECURE_TEMPLATE = "supabase.secure.conf.j2"
INSECURE_TEMPLATE = "supabase.insecure.conf.j2"
PLACEHOLDER = "SUBDOMAIN_ADDRESS"

# Upstream repository
SUPABASE_REPO_URL = "https://github.com/supabase/supabase"

# Packages
PREREQUISITE_PACKAGES = (
    "git",
    "curl",
    "gnupg",
    "openssl",
    "lsb-release",
    "ca-certificates",
    "apt-transport-https",
    "software-properties-common",
)
DOCKER_PACKAGES = (
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
)
DOCKER_KEYRING_DIR = "/etc/apt/keyrings"
DOCKER_KEYRING = "/etc/apt/keyrings/docker.gpg"
DOCKER_APT_SOURCE = "/etc/apt/sources.list.d/docker.list"

# NGINX
NGINX_SITE_NAME = "supabase_config"
NGINX_SITES_AVAILABLE = "/etc/nginx/sites-available"
NGINX_SITES_ENABLED = "/etc/nginx/sites-enabled"
SNAKEOIL_CERT = "/etc/ssl/certs/ssl-cert-snakeoil.pem"
SNAKEOIL_KEY = "/etc/ssl/private/ssl-cert-snakeoil.key"

# Certbot
CERTBOT_PACKAGES = ("certbot", "python3-certbot-nginx")
CERTBOT_WEBROOT = "/var/www/certbot"
NGINX_RUNTIME_USER = "www-data"

# Supabase .env
KONG_HTTP_PORT = "8000"
KONG_HTTPS_PORT = "8443"
URL_KEYS = ("SITE_URL", "API_EXTERNAL_URL", "SUPABASE_PUBLIC_URL")
ANON_KEY_PLACEHOLDER = "YOUR_ANON_KEY"
SERVICE_KEY_PLACEHOLDER = "YOUR_SERVICE_KEY"
