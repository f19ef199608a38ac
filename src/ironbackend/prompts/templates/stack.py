"""Tech stack prompt templates."""

from __future__ import annotations

from collections.abc import Sequence

from ironbackend.schemas.registry import TechStack

CODE_STYLES: dict[str, str] = {
    "node-nestjs": """\
// NestJS Style
@Injectable()
export class UserService {
  constructor(private readonly userRepository: UserRepository) {}

  async findById(id: string): Promise<User> {
    return this.userRepository.findById(id);
  }
}""",
    "java-spring": """\
// Spring Boot Style
@Service
public class UserService {
    private final UserRepository userRepository;

    public UserService(UserRepository userRepository) {
        this.userRepository = userRepository;
    }

    public Optional<User> findById(UUID id) {
        return userRepository.findById(id);
    }
}""",
    "dotnet-aspnetcore": """\
// ASP.NET Core Style
public class UserService : IUserService
{
    private readonly IUserRepository _userRepository;

    public UserService(IUserRepository userRepository)
    {
        _userRepository = userRepository;
    }

    public async Task<User?> FindByIdAsync(Guid id)
    {
        return await _userRepository.FindByIdAsync(id);
    }
}""",
    "python-fastapi": """\
# FastAPI Style
class UserService:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    async def find_by_id(self, id: UUID) -> User | None:
        return await self.user_repository.find_by_id(id)""",
}

STACK_STRENGTHS: dict[str, str] = {
    "node-nestjs": "Fast development, TypeScript ecosystem, real-time apps",
    "java-spring": "Enterprise apps, strong typing, mature ecosystem",
    "dotnet-aspnetcore": "Microsoft stack, high performance, enterprise features",
    "python-fastapi": "Data science, ML integration, rapid prototyping",
}


def generate_stack_prompt(stack: TechStack) -> str:
    """Full prompt section describing one technology stack."""
    sections: list[str] = []

    sections.append(f"# Technology Stack: {stack.name}\n")

    sections.append("## Language & Framework")
    sections.append(f"- **Language:** {stack.language} {stack.language_version}")
    sections.append(f"- **Framework:** {stack.framework} {stack.framework_version}\n")

    sections.append("## Database")
    sections.append(f"- **Type:** {stack.database.type}")
    sections.append(f"- **ORM:** {stack.database.orm}")
    if stack.database.driver:
        sections.append(f"- **Driver:** {stack.database.driver}")
    sections.append("")

    sections.append("## Messaging & Async")
    sections.append(f"- **Type:** {stack.messaging.type}")
    sections.append(f"- **Provider:** {stack.messaging.provider}\n")

    sections.append("## Authentication")
    sections.append(f"{stack.authentication}\n")

    sections.append("## Logging")
    sections.append(f"{stack.logging}\n")

    testing = stack.testing
    sections.append("## Testing Strategy")
    sections.append("| Test Type | Tool | Target |")
    sections.append("|-----------|------|--------|")
    sections.append(f"| Unit | {testing.unit} | {testing.coverage_target}% coverage |")
    sections.append(f"| Integration | {testing.integration} | Key flows |")
    if testing.e2e:
        sections.append(f"| E2E | {testing.e2e} | Critical paths |")
    sections.append("")

    sections.append("## Deployment")
    sections.extend(f"- {d}" for d in stack.deployment)
    sections.append("")

    sections.append("## Coding Conventions\n")
    sections.append("When writing code for this stack, follow these conventions:\n")
    sections.extend(f"{i}. {c}" for i, c in enumerate(stack.conventions, start=1))
    sections.append("")

    orm = stack.database.orm
    sections.append("## Code Examples\n")
    sections.append("### Entity/Model")
    sections.append(f"Use {orm} patterns for data modeling.\n")
    sections.append("### Repository")
    sections.append(f"Implement repository interfaces using {orm}.\n")
    sections.append("### Service")
    sections.append("Services orchestrate domain logic, inject repositories.\n")
    sections.append("### Controller/Handler")
    sections.append("Handle HTTP concerns only, delegate to services.")

    return "\n".join(sections)


def generate_stack_code_style(stack: TechStack) -> str:
    """A short idiomatic service snippet for the stack."""
    return CODE_STYLES.get(stack.id, "// Follow stack conventions")


def generate_stack_comparison_prompt(stacks: Sequence[TechStack]) -> str:
    sections: list[str] = [
        "# Technology Stack Selection Guide\n",
        "Choose the right stack based on your requirements:\n",
    ]
    for stack in stacks:
        strengths = STACK_STRENGTHS.get(stack.id, "General purpose backend development")
        sections.append(f"## {stack.name}")
        sections.append(f"- **Language:** {stack.language} {stack.language_version}")
        sections.append(f"- **Framework:** {stack.framework}")
        sections.append(f"- **Best for:** {strengths}\n")
    return "\n".join(sections)
