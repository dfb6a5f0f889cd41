"""
JenkinsMaster CLI Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Jenkins stack defaults
DEFAULT_ADMIN_USER = "admin"
DEFAULT_HTTP_PORT = 8080
DEFAULT_DOCKER_IMAGE = "jenkins/jenkins:lts"
DEFAULT_CONTAINER_NAME = "jenkinsmaster"
DEFAULT_JOB_DSL_REPO = "https://github.com/mamrezb/jenkinsmaster-job-dsl.git"
DEFAULT_SHARED_LIBRARY_REPO = (
    "https://github.com/mamrezb/jenkinsmaster-shared-library.git"
)

# Plugins that the Jenkins configuration depends on; never removable
PROTECTED_PLUGINS = (
    "configuration-as-code",
    "job-dsl",
    "pipeline-groovy-lib",
    "git",
)

DEFAULT_PLUGINS = (
    "configuration-as-code",
    "job-dsl",
    "pipeline-groovy-lib",
    "git",
    "ldap",
    "sonar",
    "jira",
    "github",
    "bitbucket",
    "gitlab-plugin",
)

# Password policy
PASSWORD_MIN_LENGTH = 8
GENERATED_PASSWORD_LENGTH = 12
GENERATE_PASSWORD_SENTINEL = "generate"

# Default SSH Configuration
DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USER = "root"
DEFAULT_SSH_PRIVATE_KEY_PATH = "~/.ssh/id_rsa"
DEFAULT_SSH_PUBLIC_KEY_PATH = "~/.ssh/id_rsa.pub"
SSH_CONNECTION_TIMEOUT = 15

# Default Hetzner Configuration
DEFAULT_HCLOUD_API_URL = "https://api.hetzner.cloud/v1"
DEFAULT_SSH_KEY_NAME = "jenkinsmaster-key"
DEFAULT_SERVER_NAME = "jenkinsmaster-server"
HCLOUD_IMAGE_TYPE = "system"
HCLOUD_ARCHITECTURE = "x86"
HCLOUD_PAGE_SIZE = 50
HTTP_TIMEOUT = 15

# Readiness and settle timing (seconds)
SSH_WAIT_TIMEOUT = 300
SSH_WAIT_DELAY = 10
SETTLE_DELAY = 60

# Terraform Configuration
DEFAULT_TERRAFORM_MODULE = "registry.terraform.io/mamrezb/jenkinsmaster/hcloud"
TERRAFORM_VARS_FILE = "jenkinsmaster.tfvars.json"
SERVER_IP_OUTPUT = "server_ip"

# Ansible Configuration
DEFAULT_ANSIBLE_ROLE = "https://github.com/mamrezb/ansible-role-jenkinsmaster.git"
ANSIBLE_FORKS = 10
ANSIBLE_INVENTORY_GROUP = "jenkins"

# External lookups
DOCKER_HUB_TAG_URL = "https://hub.docker.com/v2/repositories/{namespace}/{name}/tags/{tag}"
JENKINS_PLUGIN_URL = "https://plugins.jenkins.io/api/plugin/{plugin_id}"

# Log Configuration
DEFAULT_LOG_DIR = "~/.jenkinsmaster/logs"
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"

# Dependency install instructions
INSTALL_LINKS = {
    "ansible": "https://docs.ansible.com/ansible/latest/installation_guide/intro_installation.html",
    "terraform": "https://developer.hashicorp.com/terraform/install",
}

# Answers accepted by yes/no prompts
YES_ANSWERS = ("yes", "y")
NO_ANSWERS = ("no", "n")

# Sentinel typed at a dependency prompt to give up
EXIT_SENTINEL = "exit"
