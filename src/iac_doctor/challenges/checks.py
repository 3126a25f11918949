"""Named sub-checks shared by challenge specifications.

A check passes when its predicate returns True. Both the authoritative
validation and the live editor hint evaluate the same Check objects, so the
two can never disagree.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

import yaml

# Minimum number of non-whitespace characters that must differ for the
# generic fallback to accept an edit.
SIGNIFICANT_CHANGE_THRESHOLD = 10


@dataclass(frozen=True)
class Check:
    """A named boolean condition with the issue shown when it fails."""

    name: str
    issue: str
    predicate: Callable[[str], bool]

    def passes(self, text: str) -> bool:
        return bool(self.predicate(text))


# Predicate builders

def has(token: str) -> Callable[[str], bool]:
    return lambda text: token in text


def lacks(token: str) -> Callable[[str], bool]:
    return lambda text: token not in text


def has_any(*tokens: str) -> Callable[[str], bool]:
    return lambda text: any(token in text for token in tokens)


def has_pattern(pattern: str, flags: int = 0) -> Callable[[str], bool]:
    compiled = re.compile(pattern, flags)
    return lambda text: compiled.search(text) is not None


def lacks_pattern(pattern: str, flags: int = 0) -> Callable[[str], bool]:
    compiled = re.compile(pattern, flags)
    return lambda text: compiled.search(text) is None


def int_setting_at_least(key: str, minimum: int, default: int) -> Callable[[str], bool]:
    """Every ``key: N`` occurrence is at least ``minimum``.

    When the key is absent the Kubernetes default applies.
    """
    compiled = re.compile(rf"\b{re.escape(key)}:\s*(\d+)")

    def predicate(text: str) -> bool:
        values = [int(v) for v in compiled.findall(text)] or [default]
        return all(value >= minimum for value in values)

    return predicate


# Resource quantities

_CPU_RE = re.compile(r"\bcpu:\s*[\"']?(\d+(?:\.\d+)?)(m?)[\"']?")
_MEMORY_RE = re.compile(r"\bmemory:\s*[\"']?(\d+(?:\.\d+)?)(Ki|Mi|Gi|Ti|k|M|G|T)?[\"']?")

_MEMORY_UNITS = {
    None: 1,
    "": 1,
    "k": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
}


def cpu_quantities(text: str) -> list[float]:
    """All CPU quantities in the text, in cores."""
    return [
        float(amount) / 1000 if milli else float(amount)
        for amount, milli in _CPU_RE.findall(text)
    ]


def memory_quantities(text: str) -> list[float]:
    """All memory quantities in the text, in bytes."""
    return [
        float(amount) * _MEMORY_UNITS.get(unit, 1)
        for amount, unit in _MEMORY_RE.findall(text)
    ]


_REQUESTS_RE = re.compile(
    r"^([ \t]*)requests:([^\n]*)\n?((?:\1[ \t]+[^\n]*(?:\n|$))*)", re.MULTILINE
)


def requests_text(text: str) -> str:
    """The bodies of every ``requests:`` block, limits excluded."""
    return "\n".join(
        match.group(2) + "\n" + match.group(3) for match in _REQUESTS_RE.finditer(text)
    )


def cpu_requests_at_most(cores: float) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        values = cpu_quantities(requests_text(text))
        return bool(values) and all(value <= cores for value in values)

    return predicate


def memory_requests_at_most(limit_bytes: float) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        values = memory_quantities(requests_text(text))
        return bool(values) and all(value <= limit_bytes for value in values)

    return predicate


# Label matching

_SELECTOR_APP_RE = re.compile(r"matchLabels:\s*\n\s*app:\s*([\w.-]+)")
_TEMPLATE_APP_RE = re.compile(r"(?<![A-Za-z])labels:\s*\n\s*app:\s*([\w.-]+)")


def _first_group(compiled: re.Pattern, text: str) -> Optional[str]:
    match = compiled.search(text)
    return match.group(1) if match else None


def selector_matches_template(text: str) -> bool:
    """Deployment selector app label equals the pod template app label."""
    selector = _first_group(_SELECTOR_APP_RE, text)
    template = _first_group(_TEMPLATE_APP_RE, text)
    return selector is not None and selector == template


# Generic fallback helpers

def is_well_formed(text: str) -> bool:
    """Text carries manifest markers and parses as a YAML stream."""
    if "apiVersion" not in text or "kind" not in text:
        return False
    try:
        documents = list(yaml.safe_load_all(text))
    except (yaml.YAMLError, ValueError, RecursionError):
        return False
    return all(doc is None or isinstance(doc, dict) for doc in documents)


def changed_characters(text: str, original: str) -> int:
    """Approximate number of non-whitespace characters changed.

    Trims the common prefix and suffix of both whitespace-stripped texts and
    measures what remains, which is linear in the text length.
    """
    a = "".join(text.split())
    b = "".join(original.split())
    limit = min(len(a), len(b))

    prefix = 0
    while prefix < limit and a[prefix] == b[prefix]:
        prefix += 1

    suffix = 0
    while suffix < limit - prefix and a[-1 - suffix] == b[-1 - suffix]:
        suffix += 1

    return max(len(a), len(b)) - prefix - suffix


def generic_checks(original: str) -> tuple[Check, ...]:
    """Checks used for challenges without dedicated validation."""
    return (
        Check(
            name="well-formed",
            issue="YAML structure appears invalid - check syntax and required fields",
            predicate=is_well_formed,
        ),
        Check(
            name="changed",
            issue="No changes detected from the original broken configuration",
            predicate=lambda text: text != original,
        ),
        Check(
            name="significant-change",
            issue="Changes are too minor - make more substantial fixes to resolve the issue",
            # Unchanged text is reported by the "changed" check only
            predicate=lambda text: (
                text == original
                or changed_characters(text, original) > SIGNIFICANT_CHANGE_THRESHOLD
            ),
        ),
    )


# Challenge 1: CrashLoopBackOff

WRONG_COMMAND_REMOVED = Check(
    name="wrong-command-removed",
    issue=(
        'The command and args with "wrong-command" are still present - '
        "remove them to let nginx start normally"
    ),
    predicate=lambda text: (
        "wrong-command" not in text or ("command:" not in text and "args:" not in text)
    ),
)

USES_NGINX_LATEST = Check(
    name="nginx-latest-image",
    issue="Make sure you're using the nginx:latest image",
    predicate=has("nginx:latest"),
)

# Challenge 2: service selector

SERVICE_SELECTS_WEB_APPLICATION = Check(
    name="service-selector",
    issue=(
        'Service selector should be "app: web-application" to match the '
        "deployment pod labels"
    ),
    predicate=has_pattern(r"selector:\s*\n\s*app: web-application\b"),
)

TEMPLATE_LABELED_WEB_APPLICATION = Check(
    name="template-labels",
    issue='Make sure the deployment template labels are "app: web-application"',
    predicate=has_pattern(r"labels:\s*\n\s*app: web-application\b"),
)

# Challenge 3: external access

CLUSTER_IP_REMOVED = Check(
    name="cluster-ip-removed",
    issue="Service type is still ClusterIP which only allows internal cluster access",
    predicate=lacks_pattern(r"type:\s*ClusterIP\b"),
)

EXTERNAL_SERVICE_TYPE = Check(
    name="external-service-type",
    issue='Change the service type to "NodePort" or "LoadBalancer" for external access',
    predicate=has_pattern(r"type:\s*(NodePort|LoadBalancer)\b"),
)

# Challenge 4: missing ConfigMap

_CONFIGMAP_DOC = r"kind:\s*ConfigMap\b(?:(?!\n---)[\s\S])*?"

CONFIGMAP_DECLARED = Check(
    name="configmap-declared",
    issue=(
        'The ConfigMap "app-config" referenced by the deployment does not exist '
        "- add a ConfigMap manifest"
    ),
    predicate=has_pattern(r"kind:\s*ConfigMap\b"),
)

CONFIGMAP_NAMED_APP_CONFIG = Check(
    name="configmap-name",
    issue='The ConfigMap must be named "app-config" to match the configMapRef',
    predicate=has_pattern(_CONFIGMAP_DOC + r"name:\s*app-config\b"),
)

CONFIGMAP_HAS_DATA = Check(
    name="configmap-data",
    issue="Add a data section with the configuration values the app expects",
    predicate=has_pattern(_CONFIGMAP_DOC + r"\n\s*data:"),
)

# Challenge 5: secret not mounted

SECRET_NAME_MATCHES = Check(
    name="secret-name",
    issue='Secret name in volume should be "db-credentials" not "db-secret"',
    predicate=has_pattern(r"secretName:\s*db-credentials\b"),
)

SECRET_VOLUME_MOUNTED = Check(
    name="secret-mounted",
    issue="Mount the secret volume into the container with volumeMounts and a mountPath",
    predicate=lambda text: "volumeMounts:" in text and "mountPath:" in text,
)

# Challenge 6: readiness probe

READINESS_PROBE_KEPT = Check(
    name="readiness-probe-kept",
    issue="Keep the readiness probe - fix it rather than removing it",
    predicate=has("readinessProbe:"),
)

READINESS_PORT_FIXED = Check(
    name="readiness-port",
    issue="Readiness probe port should be 80 to match the container port, not 8080",
    predicate=lacks_pattern(r"\bport:\s*8080\b"),
)

READINESS_PATH_FIXED = Check(
    name="readiness-path",
    issue='Nginx does not serve "/health" - probe the "/" path instead',
    predicate=lacks_pattern(r"path:\s*/health\b"),
)

# Challenge 7: ImagePullBackOff

IMAGE_TYPO_FIXED = Check(
    name="image-typo",
    issue='Image name "nginxx" is a typo - use "nginx"',
    predicate=lacks("nginxx"),
)

NGINX_IMAGE_DECLARED = Check(
    name="nginx-image",
    issue="The container should still use the nginx image",
    predicate=has_pattern(r"image:\s*nginx\b"),
)

# Challenge 8: pod stuck in Pending

RESOURCE_REQUESTS_KEPT = Check(
    name="requests-kept",
    issue="Keep resource requests - lower them instead of removing them",
    predicate=has("requests:"),
)

CPU_REQUEST_SCHEDULABLE = Check(
    name="cpu-schedulable",
    issue="CPU request is more than any node can offer - use something like 100m",
    predicate=cpu_requests_at_most(1.0),
)

MEMORY_REQUEST_SCHEDULABLE = Check(
    name="memory-schedulable",
    issue="Memory request is too large for the nodes - use something like 128Mi",
    predicate=memory_requests_at_most(2 * 1024**3),
)

# Challenge 9: wrong environment variable

DATABASE_URL_DECLARED = Check(
    name="database-url-declared",
    issue="The DATABASE_URL environment variable must stay defined",
    predicate=has_pattern(r"name:\s*DATABASE_URL\b"),
)

DATABASE_URL_SET = Check(
    name="database-url-value",
    issue="DATABASE_URL is empty - set a valid database connection string",
    predicate=has_pattern(
        r"name:\s*DATABASE_URL\s*\n\s*value:\s*"
        r"(?:\"[^\"\s][^\"]*\"|'[^'\s][^']*'|[^\s\"'#])"
    ),
)

# Challenge 10: aggressive liveness probe

LIVENESS_PROBE_KEPT = Check(
    name="liveness-probe-kept",
    issue="Keep the liveness probe - tune it rather than removing it",
    predicate=has("livenessProbe:"),
)

LIVENESS_INITIAL_DELAY = Check(
    name="liveness-initial-delay",
    issue="initialDelaySeconds is too short - give the app at least 10 seconds to start",
    predicate=int_setting_at_least("initialDelaySeconds", 10, default=0),
)

LIVENESS_TIMEOUT = Check(
    name="liveness-timeout",
    issue="timeoutSeconds is too short - allow at least 2 seconds for a response",
    predicate=int_setting_at_least("timeoutSeconds", 2, default=1),
)

LIVENESS_FAILURE_THRESHOLD = Check(
    name="liveness-failure-threshold",
    issue="failureThreshold restarts the pod after a single failed probe - use 3 or more",
    predicate=int_setting_at_least("failureThreshold", 3, default=3),
)

# Challenges 22 and 40: missing resource limits

RESOURCE_LIMITS_DECLARED = Check(
    name="resource-limits",
    issue="Missing resource limits and requests section",
    predicate=lambda text: "limits:" in text and "requests:" in text,
)

CPU_DECLARED = Check(
    name="cpu-declared",
    issue="Missing CPU limits/requests",
    predicate=has("cpu:"),
)

MEMORY_DECLARED = Check(
    name="memory-declared",
    issue="Missing memory limits/requests",
    predicate=has("memory:"),
)

RESOURCE_LIMIT_CHECKS = (RESOURCE_LIMITS_DECLARED, CPU_DECLARED, MEMORY_DECLARED)

# Challenge 23: forgotten volumeMount

CONFIG_VOLUME_MOUNTED = Check(
    name="config-volume-mounted",
    issue="Mount config-volume in the container with a volumeMounts entry",
    predicate=has_pattern(r"volumeMounts:\s*\n\s*-\s*name:\s*config-volume\b"),
)

MOUNT_PATH_DECLARED = Check(
    name="mount-path",
    issue="Give the volume mount a mountPath such as /etc/config",
    predicate=has("mountPath:"),
)

# Challenge 24: bad label selector

SELECTOR_DECLARED = Check(
    name="selector-declared",
    issue="Keep selector.matchLabels - a Deployment needs a selector",
    predicate=has_pattern(r"matchLabels:\s*\n\s*app:"),
)

SELECTOR_MATCHES_TEMPLATE = Check(
    name="selector-matches-template",
    issue=(
        "Deployment selector still doesn't match pod template labels - "
        "selector.matchLabels and template.metadata.labels must use the same app label"
    ),
    predicate=selector_matches_template,
)
