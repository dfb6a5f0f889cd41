"""Existence checks against external catalogs (Docker Hub, Jenkins plugins, git remotes)."""

import os
import subprocess
from typing import Optional
from urllib.parse import quote

import requests

from jenkinsmaster.constants import DOCKER_HUB_TAG_URL, HTTP_TIMEOUT, JENKINS_PLUGIN_URL
from jenkinsmaster.validators import parse_image_reference


class ExternalLookups:
    """
    Service for checking that referenced artifacts exist.

    Every check answers True/False; transport errors count as "not found"
    so the caller can re-prompt.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = HTTP_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout

    def _exists(self, url: str) -> bool:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException:
            return False
        return response.status_code == 200

    def docker_image_exists(self, image: str) -> bool:
        """
        Check that an image tag is published on Docker Hub.

        Images from other registries cannot be looked up anonymously and
        are accepted as given.
        """
        registry, namespace, name, tag = parse_image_reference(image)
        if registry is not None:
            return True

        url = DOCKER_HUB_TAG_URL.format(
            namespace=quote(namespace, safe=""),
            name=quote(name, safe=""),
            tag=quote(tag, safe=""),
        )
        return self._exists(url)

    def jenkins_plugin_exists(self, plugin_id: str) -> bool:
        """Check that a plugin ID is known to the Jenkins plugin site."""
        return self._exists(JENKINS_PLUGIN_URL.format(plugin_id=quote(plugin_id, safe="")))

    def git_remote_reachable(self, repo_url: str, timeout: int = 30) -> bool:
        """Check that `git ls-remote` can read the repository."""
        try:
            result = subprocess.run(
                ["git", "ls-remote", repo_url],
                capture_output=True,
                text=True,
                timeout=timeout,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except (OSError, subprocess.TimeoutExpired):
            return False
        return result.returncode == 0
