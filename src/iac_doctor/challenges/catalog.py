"""Authored challenge scenarios: broken manifests, checks and messages."""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from iac_doctor.challenges import checks as c
from iac_doctor.challenges.checks import Check


@dataclass(frozen=True)
class ChallengeSpec:
    """A learning scenario and the checks its fix must satisfy."""

    challenge_id: int
    title: str
    broken_text: str
    checks: tuple[Check, ...]
    success_message: str
    failure_message: str
    hints: tuple[str, ...] = field(default_factory=tuple)
    solution: Optional[Callable[[str], str]] = None

    def solved_text(self) -> Optional[str]:
        """Reference fix applied to the broken text, if one is authored."""
        if self.solution is None:
            return None
        return self.solution(self.broken_text)


def _replace(*pairs: tuple[str, str]) -> Callable[[str], str]:
    def apply(text: str) -> str:
        for old, new in pairs:
            text = text.replace(old, new)
        return text

    return apply


def _prepend(document: str) -> Callable[[str], str]:
    return lambda text: f"{document}\n---\n{text}"


def _replace_comment_line(prefix: str, block: str) -> Callable[[str], str]:
    pattern = re.compile(rf"^[ \t]*# {re.escape(prefix)}[^\n]*$", re.MULTILINE)
    return lambda text: pattern.sub(block, text, count=1)


_RESOURCES_BLOCK = """\
        resources:
          requests:
            cpu: "100m"
            memory: "128Mi"
          limits:
            cpu: "500m"
            memory: "256Mi\""""


CRASH_LOOP = ChallengeSpec(
    challenge_id=1,
    title="Pod in CrashLoopBackOff",
    broken_text="""apiVersion: v1
kind: Pod
metadata:
  name: web-app
  labels:
    app: web
spec:
  containers:
  - name: web
    image: nginx:latest
    command: ["/bin/sh"]
    args: ["-c", "wrong-command"]  # This command doesn't exist
    ports:
    - containerPort: 80""",
    checks=(c.WRONG_COMMAND_REMOVED, c.USES_NGINX_LATEST),
    success_message=(
        "Perfect! You removed the incorrect command and args. Nginx will now start "
        "with its default configuration and the pod should run successfully."
    ),
    failure_message=(
        "The CrashLoopBackOff issue is not resolved yet. The container command is "
        "still incorrect."
    ),
    hints=(
        "Check the container command and args - are they valid?",
        "Look at the pod logs to see what error is occurring",
        "The nginx image expects to run nginx, not a custom command",
        "Remove the command and args to let nginx start normally",
    ),
    solution=_replace(
        ('    command: ["/bin/sh"]\n', ""),
        ('    args: ["-c", "wrong-command"]  # This command doesn\'t exist\n', ""),
    ),
)

SERVICE_SELECTOR = ChallengeSpec(
    challenge_id=2,
    title="Service Not Routing to Pod",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: web-app
spec:
  replicas: 3
  selector:
    matchLabels:
      app: web-application
  template:
    metadata:
      labels:
        app: web-application
    spec:
      containers:
      - name: web
        image: nginx:latest
        ports:
        - containerPort: 80
---
apiVersion: v1
kind: Service
metadata:
  name: web-service
spec:
  selector:
    app: web-app  # This doesn't match the pod labels!
  ports:
  - port: 80
    targetPort: 80
  type: ClusterIP""",
    checks=(c.SERVICE_SELECTS_WEB_APPLICATION, c.TEMPLATE_LABELED_WEB_APPLICATION),
    success_message=(
        "Excellent! You fixed the service selector to match the pod labels. Traffic "
        "can now flow properly from the service to the pods."
    ),
    failure_message=(
        "Service selector mismatch is not resolved yet. Traffic cannot reach the pods."
    ),
    hints=(
        "Compare the service selector with the pod labels",
        "Service selector must exactly match pod labels",
        "Check both the deployment template labels and service selector",
        'The service selector should be "app: web-application"',
    ),
    solution=_replace(
        (
            "app: web-app  # This doesn't match the pod labels!",
            "app: web-application  # Now matches the pod labels!",
        ),
    ),
)

EXTERNAL_ACCESS = ChallengeSpec(
    challenge_id=3,
    title="App Not Accessible Externally",
    broken_text="""apiVersion: v1
kind: Service
metadata:
  name: web-service
spec:
  selector:
    app: web
  ports:
  - port: 80
    targetPort: 80
  type: ClusterIP  # This only allows internal access
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web-app
spec:
  replicas: 2
  selector:
    matchLabels:
      app: web
  template:
    metadata:
      labels:
        app: web
    spec:
      containers:
      - name: web
        image: nginx:latest
        ports:
        - containerPort: 80""",
    checks=(c.CLUSTER_IP_REMOVED, c.EXTERNAL_SERVICE_TYPE),
    success_message=(
        "Excellent! You changed the service type to allow external access. The "
        "application should now be accessible from outside the cluster."
    ),
    failure_message=(
        "The service is still not accessible externally. Change the service type."
    ),
    hints=(
        "Check the service type - what types allow external access?",
        "ClusterIP only allows internal cluster communication",
        "NodePort or LoadBalancer types allow external access",
        "Change the service type to NodePort and add a nodePort",
    ),
    solution=_replace(
        (
            "    targetPort: 80\n  type: ClusterIP  # This only allows internal access",
            "    targetPort: 80\n    nodePort: 30080  # External port\n"
            "  type: NodePort  # Now allows external access",
        ),
    ),
)

MISSING_CONFIGMAP = ChallengeSpec(
    challenge_id=4,
    title="Missing ConfigMap",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: app-deployment
spec:
  replicas: 1
  selector:
    matchLabels:
      app: myapp
  template:
    metadata:
      labels:
        app: myapp
    spec:
      containers:
      - name: app
        image: nginx:latest
        envFrom:
        - configMapRef:
            name: app-config  # This ConfigMap doesn't exist!
        ports:
        - containerPort: 80""",
    checks=(c.CONFIGMAP_DECLARED, c.CONFIGMAP_NAMED_APP_CONFIG, c.CONFIGMAP_HAS_DATA),
    success_message=(
        'Great! You created the "app-config" ConfigMap. The pod can now load its '
        "environment and start."
    ),
    failure_message="The pod still references a ConfigMap that does not exist.",
    hints=(
        "Check if the ConfigMap referenced by the pod actually exists",
        'The pod is trying to load environment variables from "app-config"',
        "You need to create the missing ConfigMap",
        "Create a ConfigMap with some basic configuration data",
    ),
    solution=_prepend(
        """apiVersion: v1
kind: ConfigMap
metadata:
  name: app-config
data:
  database_url: "postgresql://localhost:5432/myapp"
  log_level: "info"
  max_connections: "100\""""
    ),
)

SECRET_NOT_MOUNTED = ChallengeSpec(
    challenge_id=5,
    title="Secret Not Mounted",
    broken_text="""apiVersion: v1
kind: Secret
metadata:
  name: db-credentials
type: Opaque
data:
  username: YWRtaW4=
  password: cGFzc3dvcmQ=
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: app-deployment
spec:
  replicas: 1
  selector:
    matchLabels:
      app: myapp
  template:
    metadata:
      labels:
        app: myapp
    spec:
      containers:
      - name: app
        image: nginx:latest
        volumeMounts:
        - name: db-secret
          mountPath: /etc/secrets
          readOnly: true
      volumes:
      - name: db-secret
        secret:
          secretName: db-secret  # Wrong secret name!""",
    checks=(c.SECRET_NAME_MATCHES, c.SECRET_VOLUME_MOUNTED),
    success_message=(
        "Great! You fixed the secret name reference. The application can now access "
        "the mounted credentials."
    ),
    failure_message="The secret mounting issue is not resolved yet.",
    hints=(
        "Check if the secret name in the volume matches the actual secret name",
        'The volume references "db-secret" but the secret is named "db-credentials"',
        "Secret names must match exactly between the volume and the actual secret",
        "Fix the secretName in the volume definition",
    ),
    solution=_replace(
        ("secretName: db-secret  # Wrong secret name!", "secretName: db-credentials"),
    ),
)

READINESS_PROBE = ChallengeSpec(
    challenge_id=6,
    title="Readiness Probe Failing",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: api-app
spec:
  replicas: 3
  selector:
    matchLabels:
      app: api
  template:
    metadata:
      labels:
        app: api
    spec:
      containers:
      - name: api
        image: nginx:latest
        ports:
        - containerPort: 80
        readinessProbe:
          httpGet:
            path: /health  # This endpoint doesn't exist in nginx
            port: 8080     # Wrong port
          initialDelaySeconds: 5
          periodSeconds: 10""",
    checks=(c.READINESS_PROBE_KEPT, c.READINESS_PORT_FIXED, c.READINESS_PATH_FIXED),
    success_message=(
        "Nice work! The readiness probe now hits a path and port nginx actually "
        "serves, so the pods will become ready."
    ),
    failure_message="The readiness probe still cannot succeed.",
    hints=(
        "Check if the readiness probe path exists on the nginx server",
        "Verify the port number matches the container port",
        "Nginx serves content on port 80, not 8080",
        'Try using "/" path instead of "/health" for nginx',
    ),
    solution=_replace(
        ("path: /health  # This endpoint doesn't exist in nginx", "path: /"),
        ("port: 8080     # Wrong port", "port: 80"),
    ),
)

IMAGE_PULL_BACKOFF = ChallengeSpec(
    challenge_id=7,
    title="ImagePullBackOff",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: web-app
spec:
  replicas: 2
  selector:
    matchLabels:
      app: web
  template:
    metadata:
      labels:
        app: web
    spec:
      containers:
      - name: web
        image: nginxx:latest  # Typo in image name!
        ports:
        - containerPort: 80""",
    checks=(c.IMAGE_TYPO_FIXED, c.NGINX_IMAGE_DECLARED),
    success_message=(
        "Great! You fixed the image name. The container image can now be pulled."
    ),
    failure_message="The image still cannot be pulled.",
    hints=(
        "Check the image name carefully for any typos",
        'The image name "nginxx" is not correct',
        'The correct nginx image name is "nginx"',
        "Fix the typo in the image name",
    ),
    solution=_replace(("nginxx:latest  # Typo in image name!", "nginx:latest")),
)

POD_PENDING = ChallengeSpec(
    challenge_id=8,
    title="Pod Stuck in Pending",
    broken_text="""apiVersion: v1
kind: Pod
metadata:
  name: resource-heavy-pod
  labels:
    app: heavy-app
spec:
  containers:
  - name: app
    image: nginx:latest
    resources:
      requests:
        cpu: "4"      # Requesting 4 CPUs
        memory: "8Gi" # Requesting 8GB RAM
      limits:
        cpu: "4"
        memory: "8Gi"
    ports:
    - containerPort: 80""",
    checks=(
        c.RESOURCE_REQUESTS_KEPT,
        c.CPU_REQUEST_SCHEDULABLE,
        c.MEMORY_REQUEST_SCHEDULABLE,
    ),
    success_message=(
        "Perfect! The resource requests now fit on the available nodes, so the pod "
        "can be scheduled."
    ),
    failure_message="The pod still requests more resources than any node has.",
    hints=(
        "Check the resource requests - are they too high?",
        "Most development clusters have limited CPU and memory",
        "Try reducing the CPU request to 100m and memory to 128Mi",
        "Resource requests should match what the application actually needs",
    ),
    solution=_replace(
        ('cpu: "4"      # Requesting 4 CPUs', 'cpu: "100m"'),
        ('memory: "8Gi" # Requesting 8GB RAM', 'memory: "128Mi"'),
        ('cpu: "4"', 'cpu: "500m"'),
        ('memory: "8Gi"', 'memory: "256Mi"'),
    ),
)

WRONG_ENV_VAR = ChallengeSpec(
    challenge_id=9,
    title="Wrong Environment Variable",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: api-app
spec:
  replicas: 2
  selector:
    matchLabels:
      app: api
  template:
    metadata:
      labels:
        app: api
    spec:
      containers:
      - name: api
        image: node:16-alpine
        command: ["node", "server.js"]
        env:
        - name: NODE_ENV
          value: "development"
        - name: DATABASE_URL
          value: ""  # Empty database URL!
        - name: PORT
          value: "3000"
        ports:
        - containerPort: 3000""",
    checks=(c.DATABASE_URL_DECLARED, c.DATABASE_URL_SET),
    success_message="Perfect! You set the required DATABASE_URL environment variable.",
    failure_message="Required environment variables are missing or empty.",
    hints=(
        "Check all environment variables for missing or empty values",
        "The DATABASE_URL is empty which will cause connection failures",
        "Applications typically need valid database connection strings",
        "Set a proper DATABASE_URL value",
    ),
    solution=_replace(
        (
            'value: ""  # Empty database URL!',
            'value: "postgresql://db:5432/app"',
        ),
    ),
)

AGGRESSIVE_LIVENESS = ChallengeSpec(
    challenge_id=10,
    title="Liveness Probe Causes Pod Restart",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: slow-app
spec:
  replicas: 2
  selector:
    matchLabels:
      app: slow-app
  template:
    metadata:
      labels:
        app: slow-app
    spec:
      containers:
      - name: app
        image: nginx:latest
        ports:
        - containerPort: 80
        livenessProbe:
          httpGet:
            path: /
            port: 80
          initialDelaySeconds: 1  # Too short for app startup
          periodSeconds: 5        # Too frequent
          timeoutSeconds: 1       # Too short timeout
          failureThreshold: 1     # Too sensitive""",
    checks=(
        c.LIVENESS_PROBE_KEPT,
        c.LIVENESS_INITIAL_DELAY,
        c.LIVENESS_TIMEOUT,
        c.LIVENESS_FAILURE_THRESHOLD,
    ),
    success_message=(
        "Great! The liveness probe now gives the app time to start and tolerates "
        "a slow response, so pods stop restarting."
    ),
    failure_message="The liveness probe is still too aggressive.",
    hints=(
        "Check if the liveness probe timing is too aggressive",
        "Applications need time to start up before health checks",
        "Increase initialDelaySeconds to give the app time to start",
        "Consider increasing timeoutSeconds and failureThreshold",
    ),
    solution=_replace(
        ("initialDelaySeconds: 1  # Too short for app startup", "initialDelaySeconds: 15"),
        ("periodSeconds: 5        # Too frequent", "periodSeconds: 10"),
        ("timeoutSeconds: 1       # Too short timeout", "timeoutSeconds: 3"),
        ("failureThreshold: 1     # Too sensitive", "failureThreshold: 3"),
    ),
)

NO_RESOURCE_LIMITS = ChallengeSpec(
    challenge_id=22,
    title="No Resource Limits",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: cpu-intensive-app
spec:
  replicas: 1
  selector:
    matchLabels:
      app: cpu-app
  template:
    metadata:
      labels:
        app: cpu-app
    spec:
      containers:
      - name: app
        image: nginx:latest
        # No resource limits or requests defined""",
    checks=c.RESOURCE_LIMIT_CHECKS,
    success_message=(
        "Perfect! You added proper resource limits and requests. The pod can no "
        "longer starve its neighbours."
    ),
    failure_message="Resource configuration is incomplete.",
    hints=(
        "Add resource requests and limits to the container",
        "CPU limits prevent excessive CPU usage",
        "Memory limits prevent OOM issues",
        "Use reasonable values like 100m CPU and 128Mi memory",
    ),
    solution=_replace_comment_line("No resource", _RESOURCES_BLOCK),
)

FORGOTTEN_VOLUME_MOUNT = ChallengeSpec(
    challenge_id=23,
    title="Forgotten VolumeMount",
    broken_text="""apiVersion: v1
kind: ConfigMap
metadata:
  name: app-config
data:
  config.yaml: |
    database:
      host: db.example.com
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web-app
spec:
  replicas: 1
  selector:
    matchLabels:
      app: web
  template:
    metadata:
      labels:
        app: web
    spec:
      containers:
      - name: web
        image: nginx:latest
        # Missing volumeMounts section
      volumes:
      - name: config-volume
        configMap:
          name: app-config""",
    checks=(c.CONFIG_VOLUME_MOUNTED, c.MOUNT_PATH_DECLARED),
    success_message=(
        "Nice! The declared volume is now mounted, so the container can read its "
        "configuration."
    ),
    failure_message="The volume is declared but still not mounted in the container.",
    hints=(
        "Volume is declared but not mounted in container",
        "Add volumeMounts section to container spec",
        "Mount the config-volume to a path like /etc/config",
        "Container needs volumeMounts to access the volume",
    ),
    solution=_replace_comment_line(
        "Missing volumeMounts",
        "        volumeMounts:\n"
        "        - name: config-volume\n"
        "          mountPath: /etc/config",
    ),
)

BAD_LABEL_SELECTOR = ChallengeSpec(
    challenge_id=24,
    title="Bad Label Selector",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: web-app
spec:
  replicas: 3
  selector:
    matchLabels:
      app: frontend  # This doesn't match template labels
  template:
    metadata:
      labels:
        app: web-app  # Different from selector
    spec:
      containers:
      - name: web
        image: nginx:latest""",
    checks=(c.SELECTOR_DECLARED, c.SELECTOR_MATCHES_TEMPLATE),
    success_message=(
        "Excellent! You fixed the label selector mismatch. The deployment can now "
        "manage its pods correctly."
    ),
    failure_message="Label selector mismatch is not resolved yet.",
    hints=(
        "Compare deployment selector with template labels",
        "Selector and template labels must match exactly",
        'Either change selector to "app: web-app" or template to "app: frontend"',
        "Deployment uses selector to find its pods",
    ),
    solution=_replace(
        (
            "app: frontend  # This doesn't match template labels",
            "app: web-app  # Now matches template labels",
        ),
    ),
)

RESOURCE_STARVATION = ChallengeSpec(
    challenge_id=40,
    title="Resource Starvation",
    broken_text="""apiVersion: apps/v1
kind: Deployment
metadata:
  name: memory-app
spec:
  replicas: 5
  selector:
    matchLabels:
      app: memory-app
  template:
    metadata:
      labels:
        app: memory-app
    spec:
      containers:
      - name: app
        image: nginx:latest
        # No resource requests or limits - BestEffort QoS""",
    # Same fix as challenge 22, framed around eviction instead of noisy neighbours
    checks=c.RESOURCE_LIMIT_CHECKS,
    success_message=(
        "Perfect! With requests and limits set the pod is no longer BestEffort and "
        "will not be the first to be evicted."
    ),
    failure_message="The pod still has BestEffort QoS and will be evicted first.",
    hints=(
        "Pods without resource requests have BestEffort QoS",
        "BestEffort pods are evicted first under memory pressure",
        "Add resource requests to get Burstable QoS",
        "Add both requests and limits for Guaranteed QoS",
    ),
    solution=_replace_comment_line("No resource", _RESOURCES_BLOCK),
)


CHALLENGES: Mapping[int, ChallengeSpec] = MappingProxyType(
    {
        spec.challenge_id: spec
        for spec in (
            CRASH_LOOP,
            SERVICE_SELECTOR,
            EXTERNAL_ACCESS,
            MISSING_CONFIGMAP,
            SECRET_NOT_MOUNTED,
            READINESS_PROBE,
            IMAGE_PULL_BACKOFF,
            POD_PENDING,
            WRONG_ENV_VAR,
            AGGRESSIVE_LIVENESS,
            NO_RESOURCE_LIMITS,
            FORGOTTEN_VOLUME_MOUNT,
            BAD_LABEL_SELECTOR,
            RESOURCE_STARVATION,
        )
    }
)


def generic_spec(challenge_id: int, original: str = "") -> ChallengeSpec:
    """Fallback spec for challenges without dedicated checks."""
    return ChallengeSpec(
        challenge_id=challenge_id,
        title=f"Challenge {challenge_id}",
        broken_text=original,
        checks=c.generic_checks(original),
        success_message=(
            f"Changes detected! Challenge {challenge_id} has no dedicated checks, so "
            "only the structure and size of your edit were verified."
        ),
        failure_message="Please make meaningful changes to fix the configuration issue.",
    )
