"""Text templates returned to the calling agent."""

from __future__ import annotations

from pagegen.ai.pipeline.contracts import StageName

MERGE_INSTRUCTIONS_TEMPLATE = """\
TASK: Create a new React page with the generated components

GENERATED CODE:
{{CODE}}

INSTRUCTIONS:
1. Create the file with the generated code
2. Check available scripts in package.json and run them iteratively until all errors are resolved:
   - Run 'npm run build' or 'pnpm build' to compile the page
   - Run 'npm run lint' or 'pnpm lint' to check for ESLint errors
   - Run 'npm run prettier' or 'pnpm prettier' if available to format code
   - Run 'npx tsc --noEmit' to check TypeScript compilation errors
3. Fix any errors that appear and iterate until everything works:
   - Fix ESLint errors by correcting code style and syntax issues
   - Fix TypeScript errors by correcting type issues and imports
   - Fix build errors by ensuring all dependencies are properly installed
   - Fix Prettier formatting issues if the script is available
4. If the build fails, check for missing component packages and install them:
   - Install missing UI library packages as needed
   - Ensure all imports are valid and components are used correctly
5. Continue iterating through the script checks until:
   - Build completes successfully with no errors
   - Lint passes with no warnings or errors
   - TypeScript compilation succeeds with no type errors
   - Prettier formatting is applied (if available)
6. The page should be fully functional and error-free before considering the task complete
"""

NEXT_STEPS: dict[StageName, str | None] = {
  StageName.PLAN: "Call the 'structure' tool with the same query and this artifact as the plan.",
  StageName.STRUCTURE: "Call the 'merge' tool with this artifact as the structure.",
  StageName.MERGE: None,
}


def _replace_placeholders(template: str, values: dict[str, str]) -> str:
  """Substitute {{PLACEHOLDER}} markers."""
  rendered = template
  for key, value in values.items():
    rendered = rendered.replace(f"{{{{{key}}}}}", value)

  return rendered


def render_merge_instructions(code: str) -> str:
  """Embed generated code, verbatim, in the follow-up instructions for the agent."""
  return _replace_placeholders(MERGE_INSTRUCTIONS_TEMPLATE, {"CODE": code})
