"""PHP framework (Laravel, Symfony) and async runtime (ReactPHP, Swoole, Fibers) scaffolding.

Each integration writes PHP sources under ``<outputPath>/<namespace>/`` next to
the generated messages. Existing files are never overwritten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bufrplan.modules.base import (
    HookStep,
    LocalConfig,
    PluginModuleResult,
    combine,
    echo_step,
    feature,
    scoped_feature,
    write_file_step,
)

if TYPE_CHECKING:
    from bufrplan.config.resolver import EffectiveConfig

_LARAVEL_PROVIDER = """\
<?php

namespace {namespace}\\Laravel;

use Google\\Protobuf\\Internal\\DescriptorPool;
use Illuminate\\Support\\ServiceProvider;

class ProtobufServiceProvider extends ServiceProvider
{{
    public function register(): void
    {{
        $this->app->singleton(DescriptorPool::class, fn () => DescriptorPool::getGeneratedPool());
    }}

    public function boot(): void
    {{
        if ($this->app->runningInConsole() && class_exists(Console\\ProtoListCommand::class)) {{
            $this->commands([Console\\ProtoListCommand::class]);
        }}
    }}
}}
"""

_LARAVEL_COMMAND = """\
<?php

namespace {namespace}\\Laravel\\Console;

use Illuminate\\Console\\Command;

class ProtoListCommand extends Command
{{
    protected $signature = 'proto:list';

    protected $description = 'List generated protobuf message classes';

    public function handle(): int
    {{
        foreach (get_declared_classes() as $class) {{
            if (str_starts_with($class, '{namespace_literal}\\\\')) {{
                $this->line($class);
            }}
        }}
        return self::SUCCESS;
    }}
}}
"""

_SYMFONY_BUNDLE = """\
<?php

namespace {namespace}\\Symfony;

use Symfony\\Component\\HttpKernel\\Bundle\\Bundle;

class ProtobufBundle extends Bundle
{{
}}
"""

_SYMFONY_SERIALIZER = """\
<?php

namespace {namespace}\\Symfony\\Messenger;

use Google\\Protobuf\\Internal\\Message;
use Symfony\\Component\\Messenger\\Envelope;
use Symfony\\Component\\Messenger\\Transport\\Serialization\\SerializerInterface;

class ProtobufMessageSerializer implements SerializerInterface
{{
    public function decode(array $encodedEnvelope): Envelope
    {{
        $class = $encodedEnvelope['headers']['type'];
        /** @var Message $message */
        $message = new $class();
        $message->mergeFromJsonString($encodedEnvelope['body']);
        return new Envelope($message);
    }}

    public function encode(Envelope $envelope): array
    {{
        $message = $envelope->getMessage();
        return [
            'body' => $message->serializeToJsonString(),
            'headers' => ['type' => get_class($message)],
        ];
    }}
}}
"""

_REACTPHP_ADAPTER = """\
<?php

namespace {namespace}\\Async;

use React\\Promise\\PromiseInterface;

use function React\\Async\\async;

final class ReactAdapter
{{
    public static function call(callable $unary, mixed ...$args): PromiseInterface
    {{
        return async($unary)(...$args);
    }}
}}
"""

_SWOOLE_RUNNER = """\
<?php

namespace {namespace}\\Async;

final class SwooleRunner
{{
    public const COROUTINES = {coroutines};

    public static function run(callable $task): mixed
    {{
        if (!self::COROUTINES) {{
            return $task();
        }}
        $result = null;
        \\Swoole\\Coroutine\\run(function () use ($task, &$result) {{
            $result = $task();
        }});
        return $result;
    }}
}}
"""

_FIBER_RUNNER = """\
<?php

namespace {namespace}\\Async;

final class FiberRunner
{{
    public static function start(callable $task, mixed ...$args): \\Fiber
    {{
        $fiber = new \\Fiber($task);
        $fiber->start(...$args);
        return $fiber;
    }}
}}
"""


def php_namespace(global_config: EffectiveConfig) -> str:
    return str(global_config.get_path("languages.php.namespace", "") or "Generated")


def namespace_dir(output_path: str, namespace: str) -> str:
    """``gen/php`` + ``Acme\\Api`` -> ``gen/php/Acme/Api``."""

    parts = [part for part in namespace.split("\\") if part]
    return "/".join([output_path, *parts])


def _render(template: str, namespace: str, **extra: str) -> str:
    return template.format(
        namespace=namespace,
        namespace_literal=namespace.replace("\\", "\\\\"),
        **extra,
    )


@feature
def php_laravel(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    namespace = php_namespace(global_config)
    root = namespace_dir(local["outputPath"], namespace)
    steps: list[HookStep] = []
    if local.get("serviceProvider", True):
        steps.append(
            write_file_step(
                "laravel-service-provider",
                f"{root}/Laravel/ProtobufServiceProvider.php",
                _render(_LARAVEL_PROVIDER, namespace),
            )
        )
    if local.get("artisanCommands", True):
        steps.append(
            write_file_step(
                "laravel-artisan-commands",
                f"{root}/Laravel/Console/ProtoListCommand.php",
                _render(_LARAVEL_COMMAND, namespace),
            )
        )
    steps.append(echo_step("laravel-summary", f"Generated Laravel integration in {root}/Laravel"))
    return PluginModuleResult(generate_hooks=tuple(steps))


@feature
def php_symfony(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    namespace = php_namespace(global_config)
    root = namespace_dir(local["outputPath"], namespace)
    steps: list[HookStep] = []
    if local.get("bundle", True):
        steps.append(
            write_file_step(
                "symfony-bundle",
                f"{root}/Symfony/ProtobufBundle.php",
                _render(_SYMFONY_BUNDLE, namespace),
            )
        )
    if local.get("messengerIntegration", True):
        steps.append(
            write_file_step(
                "symfony-messenger",
                f"{root}/Symfony/Messenger/ProtobufMessageSerializer.php",
                _render(_SYMFONY_SERIALIZER, namespace),
            )
        )
    steps.append(echo_step("symfony-summary", f"Generated Symfony integration in {root}/Symfony"))
    return PluginModuleResult(generate_hooks=tuple(steps))


@feature
def php_reactphp(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    namespace = php_namespace(global_config)
    root = namespace_dir(local["outputPath"], namespace)
    version = local.get("version") or "^1.0"
    return PluginModuleResult(
        init_hooks=(
            echo_step("reactphp-requirement", f"ReactPHP support requires react/async {version}"),
        ),
        generate_hooks=(
            write_file_step(
                "reactphp-adapter",
                f"{root}/Async/ReactAdapter.php",
                _render(_REACTPHP_ADAPTER, namespace),
            ),
        ),
    )


@feature
def php_swoole(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    namespace = php_namespace(global_config)
    root = namespace_dir(local["outputPath"], namespace)
    coroutines = "true" if local.get("coroutines", True) else "false"
    return PluginModuleResult(
        init_hooks=(echo_step("swoole-requirement", "Swoole support requires ext-swoole"),),
        generate_hooks=(
            write_file_step(
                "swoole-runner",
                f"{root}/Async/SwooleRunner.php",
                _render(_SWOOLE_RUNNER, namespace, coroutines=coroutines),
            ),
        ),
    )


@feature
def php_fibers(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    namespace = php_namespace(global_config)
    root = namespace_dir(local["outputPath"], namespace)
    return PluginModuleResult(
        generate_hooks=(
            write_file_step(
                "fiber-runner",
                f"{root}/Async/FiberRunner.php",
                _render(_FIBER_RUNNER, namespace),
            ),
        ),
    )


_FRAMEWORKS = (scoped_feature("laravel", php_laravel), scoped_feature("symfony", php_symfony))
_ASYNC_RUNTIMES = (
    scoped_feature("reactphp", php_reactphp),
    scoped_feature("swoole", php_swoole),
    scoped_feature("fibers", php_fibers),
)


def php_frameworks(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    """Run every enabled framework integration, Laravel before Symfony."""

    return combine(_FRAMEWORKS, global_config, local)


def php_async(global_config: EffectiveConfig, local: LocalConfig) -> PluginModuleResult:
    return combine(_ASYNC_RUNTIMES, global_config, local)


__all__ = [
    "namespace_dir",
    "php_async",
    "php_frameworks",
    "php_namespace",
]
