"""Cache mixin providing AWS-resolved ElastiCache client initialization.

Responsibilities:
    - Initialize a TLS-enabled Redis client targeting AWS ElastiCache.
    - Resolve connection parameters from AWS SSM Parameter Store.
    - Resolve credentials from AWS Secrets Manager.
    - Delegate healthcheck to RedisClientMixin and assign CacheKeySchema.

Classes:
    - ElastiCacheClientMixin: Base mixin to inject AWS-resolved client setup
      (TLS + AUTH) and reuse RedisClientMixin's healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ResolutionCacheDAO(ElastiCacheClientMixin, ResolutionCacheBaseDAO):
        ...     pass
        ...
        >>> dao = ResolutionCacheDAO(prefix="shortlink:dev")
        >>> dao._healthcheck()
        True

Environment variables (paths/names to resolve at runtime):
    - ELASTICACHE_HOST_PARAM  : SSM parameter path for Redis host
    - ELASTICACHE_PORT_PARAM  : SSM parameter path for Redis port
    - ELASTICACHE_DB_PARAM    : SSM parameter path for Redis DB index
    - ELASTICACHE_USER_PARAM  : SSM parameter path for Redis username (optional)
    - ELASTICACHE_SECRET      : Secrets Manager name for {"username": "...", "password": "..."}
    - LOCALSTACK_ENDPOINT     : LocalStack endpoint URL for local development
"""

import json
import os
from typing import Optional

import boto3
import redis

from shortlink.types import SSMClient, SecretsManagerClient
from shortlink.constants import ENV
from shortlink.exceptions import BadConfigurationError
from shortlink.dao.cache.cache_key_schema import CacheKeySchema
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.utils.runtime import running_locally
from shortlink.utils.helpers import require_environment


def _aws_client_kwargs() -> dict[str, str]:
    # LocalStack stands in for SSM and Secrets Manager when running locally
    if running_locally():
        return {'endpoint_url': os.environ.get(ENV.LocalStack.ENDPOINT, 'http://localhost:4566')}
    return {}


class ElastiCacheClientMixin(RedisClientMixin):
    """Mixin ElastiCache client setup using AWS SSM/Secrets with TLS by default.

    This mixin resolves connection parameters from SSM and credentials from
    Secrets Manager, constructs a Redis client (TLS in AWS; plain in local),
    and passes it to the parent RedisClientMixin for healthcheck wiring.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance created with TLS and (optional) AUTH.

        keys (CacheKeySchema):
            Helper class for generating namespaced cache key names.

    Args:
        prefix (Optional[str]):
            Namespace prefix for all cache keys, e.g. 'app:env'.
        ssm_client (Optional[SSMClient]):
            Optional boto3 SSM client to reuse (useful in tests).
            If None, a new client is created (points to LocalStack in local mode).
        secrets_client (Optional[SecretsManagerClient]):
            Optional boto3 Secrets Manager client to reuse (useful in tests).
            If None, a new client is created (points to LocalStack in local mode).
        redis_client (Optional[redis.Redis]):
            Pre-initialized Redis client. If given, SSM and Secrets Manager are not consulted.
        redis_decode_responses (bool):
            If True, decodes Redis responses. Defaults to True.
        tls_verify (bool):
            If True, require certificate verification (ssl_cert_reqs='required').
        ca_bundle_path (Optional[str]):
            Optional path to a CA bundle file for certificate verification.

    Raises:
        MissingEnvironmentVariableError:
            If required environment variables are missing.
        BadConfigurationError:
            If SSM values are malformed (e.g., non-integer port/db) or the secret payload
            is invalid/missing required fields.
        botocore.exceptions.BotoCoreError / ClientError:
            On AWS API failures while reading SSM or Secrets Manager.
        DataStoreError:
            If the Redis healthcheck fails after initialization (raised by parent mixin).
    """

    def __init__(
        self,
        prefix: Optional[str] = None,
        ssm_client: Optional[SSMClient] = None,
        secrets_client: Optional[SecretsManagerClient] = None,
        redis_client: Optional[redis.Redis] = None,
        redis_decode_responses: bool = True,
        tls_verify: bool = False,
        ca_bundle_path: Optional[str] = None,
    ):
        if redis_client is None:
            redis_client = self._build_client(ssm_client, secrets_client, redis_decode_responses, tls_verify, ca_bundle_path)

        # Delegate to base mixin: sets self.redis and runs healthcheck
        super().__init__(redis_client=redis_client, prefix=prefix)
        self.keys = CacheKeySchema(prefix=prefix)

    @classmethod
    def _build_client(
        cls,
        ssm_client: Optional[SSMClient],
        secrets_client: Optional[SecretsManagerClient],
        decode_responses: bool,
        tls_verify: bool,
        ca_bundle_path: Optional[str],
    ) -> redis.Redis:
        # Resolve runtime settings from AWS (or LocalStack in local mode)
        host, port, db, user_from_ssm = cls._resolve_ssm_params(ssm_client)
        username, password = cls._resolve_secret(secrets_client)
        username = username or user_from_ssm  # prefer secret, fallback to SSM, or None

        client_kwargs = dict(
            host=host,
            port=port,
            db=db,
            username=username,
            password=password,
            decode_responses=decode_responses,
        )

        if running_locally():
            # Local Redis typically runs without TLS
            client_kwargs.update(ssl=False)
        else:
            # ElastiCache requires TLS when AuthToken is enabled
            client_kwargs.update(
                ssl=True,
                ssl_cert_reqs='required' if tls_verify else None,
            )
            if tls_verify and ca_bundle_path:
                client_kwargs['ssl_ca_certs'] = ca_bundle_path

        return redis.Redis(**client_kwargs)

    @staticmethod
    @require_environment(ENV.ElastiCache.HOST_PARAM, ENV.ElastiCache.PORT_PARAM, ENV.ElastiCache.DB_PARAM)
    def _resolve_ssm_params(ssm_client: Optional[SSMClient]) -> tuple[str, int, int, Optional[str]]:
        """Resolve host, port, db, and optional username from SSM Parameter Store.

        Returns:
            tuple[str, int, int, Optional[str]]:
                (host, port, db, user_from_ssm_or_none)

        Raises:
            botocore.exceptions.BotoCoreError / ClientError:
                On AWS SSM API failures.
            BadConfigurationError:
                If SSM responses are malformed or port/db cannot be cast to int.
        """
        host_param = os.environ[ENV.ElastiCache.HOST_PARAM]
        port_param = os.environ[ENV.ElastiCache.PORT_PARAM]
        db_param = os.environ[ENV.ElastiCache.DB_PARAM]
        user_param = os.environ.get(ENV.ElastiCache.USER_PARAM)  # optional

        ssm = ssm_client or boto3.client('ssm', **_aws_client_kwargs())

        try:
            host = ssm.get_parameter(Name=host_param)['Parameter']['Value']
            port_str = ssm.get_parameter(Name=port_param)['Parameter']['Value']
            db_str = ssm.get_parameter(Name=db_param)['Parameter']['Value']
            user = None
            if user_param:
                user = ssm.get_parameter(Name=user_param)['Parameter']['Value']
        except KeyError as e:
            raise BadConfigurationError('Malformed SSM get_parameter response') from e

        try:
            port = int(port_str)
            db = int(db_str)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f'Invalid ElastiCache port/db values: port={port_str!r} db={db_str!r}') from e

        return host, port, db, user

    @staticmethod
    @require_environment(ENV.ElastiCache.SECRET)
    def _resolve_secret(secrets_client: Optional[SecretsManagerClient]) -> tuple[Optional[str], Optional[str]]:
        """Resolve optional username and password from Secrets Manager.

        The secret is expected to be a JSON object with fields:
            - "username": optional string (commonly None for ElastiCache token auth)
            - "password": the AuthToken, required outside of local runs

        Returns:
            tuple[Optional[str], Optional[str]]:
                (username_or_none, password)

        Raises:
            botocore.exceptions.BotoCoreError / ClientError:
                On AWS Secrets Manager API failures.
            BadConfigurationError:
                If the secret payload is not valid JSON or lacks a password in AWS.
        """
        secret_name = os.environ[ENV.ElastiCache.SECRET]
        sm = secrets_client or boto3.client('secretsmanager', **_aws_client_kwargs())

        try:
            raw = sm.get_secret_value(SecretId=secret_name).get('SecretString')
            payload = json.loads(raw or '{}')
        except json.JSONDecodeError as e:
            raise BadConfigurationError('Invalid JSON in ElastiCache secret payload') from e

        username = payload.get('username')
        password = payload.get('password')

        # Local Redis runs without AUTH
        if not password and not running_locally():
            raise BadConfigurationError('ElastiCache secret must contain a non-empty "password" field')

        return username, password
