"""Prompt builders for every model call in the plan pipeline."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from core import ChannelProfile, ContentIdea, Event, NicheProfile, SearchResult, VideoSummary
from core.plan import EQUIPMENT_PER_PLAN, TASKS_PER_WEEK, TEMPLATES_PER_PLAN, WEEKS_PER_PLAN


def _json_block(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _video_context(channel: ChannelProfile) -> str:
    if not channel.recent_videos:
        return "No recent videos"
    lines: List[str] = []
    for idx, video in enumerate(channel.recent_videos, 1):
        if isinstance(video, VideoSummary):
            line = f'{idx}. "{video.title}"'
            if video.description:
                line += f"\n   Description: {video.description}"
        else:
            line = f'{idx}. "{video}"'
        lines.append(line)
    return "\n".join(lines)


def niche_structured_prompt(channel: ChannelProfile) -> str:
    stats: List[str] = []
    if channel.subscriber_count > 0:
        stats.append(f"Subscribers: {channel.subscriber_count:,}")
    if channel.video_count > 0:
        stats.append(f"Total Videos: {channel.video_count}")

    return f"""Analyze this YouTube channel and determine its EXACT niche. Be specific.

Channel Name: {channel.name}
Channel Description: {channel.description or 'No description available'}

Recent Videos:
{_video_context(channel)}

{chr(10).join(stats)}

Rules:
1. Look for keywords and patterns in the channel name, description and video titles
2. If the channel has no videos or description, analyze the name itself
3. Never return generic niches like "Content Creation" or "General"
4. Prefer practical, YouTube-friendly niches (e.g. "Tech Scam Exposes", "Everyday Psychology Tips",
   "Side Hustle Ideas", "Movie Breakdown Analysis") over academic categories

Return ONLY this JSON:
{{
  "broadCategory": "Technology/Crime/Business/Education/Entertainment/etc",
  "specificNiche": "EXACT specific niche (2-5 words)",
  "subCategories": ["specific tag1", "specific tag2", "specific tag3"],
  "confidence": "high/medium/low",
  "reasoning": "The clues that led to this niche"
}}"""


def niche_simple_prompt(channel: ChannelProfile) -> str:
    return f"""Analyze this YouTube channel: "{channel.name}"
Description: {channel.description}
Videos: {', '.join(channel.video_titles())}

Return ONLY a specific 2-4 word niche category. Examples: "Fitness Motivation", "Gaming Commentary", "Cooking Tutorials", "Life Advice", "Product Reviews".
"""


def events_search_query(niche: str, sub_categories: Sequence[str], *, now: Optional[datetime] = None) -> str:
    year = (now or datetime.now(timezone.utc)).year
    query = f"major {niche} events incidents news {year} {year - 1}"
    tags = [str(item).strip() for item in sub_categories if str(item).strip()]
    if tags:
        query += " " + " ".join(tags)
    return query


def events_extraction_prompt(niche: str, timeframe: str, results: Sequence[SearchResult], summary: str) -> str:
    payload = [item.model_dump(mode="json", by_alias=True) for item in results]
    return f"""From these search results about {niche}, extract 8-12 REAL, specific events from the last {timeframe} that would make compelling YouTube video content.

Search Results:
{_json_block(payload)}

Summary: {summary}

For each event, provide:
- title: Specific event title with real names (company/person/location)
- date: Approximate date (YYYY-MM format)
- description: Brief description (1-2 sentences)
- entities: Array of specific names mentioned (companies, people, locations)
- videoAngle: Why this would make a great YouTube video
- estimatedViews: Realistic view potential (e.g. "50K-100K")

Every event MUST be based on an incident from the search results above, name specific
entities (no "The Company" or "A Person") and carry an approximate date.
Prefer viral stories, launches, scandals and practical breakthroughs over academic conferences.

Return ONLY a JSON array of events, no other text."""


def validation_prompt(ideas: Sequence[ContentIdea], events: Sequence[Event], niche: str) -> str:
    idea_payload = [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in ideas]
    event_payload = [item.model_dump(mode="json", by_alias=True) for item in events]
    return f"""Validate and enhance these content ideas for a {niche} channel.

Content Ideas to Validate:
{_json_block(idea_payload)}

Real Events for Reference:
{_json_block(event_payload)}

For each content idea:
1. Check if it references a real event from the list
2. If it is generic or templated, replace it with one grounded in a specific real event
3. Add specific details (names, dates, locations)
4. Keep the title compelling and specific

Return ONLY a JSON array in this format:
[
  {{
    "title": "Specific title with real names and details",
    "hook": "15-second opening hook",
    "description": "What the video covers",
    "estimatedViews": "Realistic view range",
    "basedOnEvent": "Which real event this references",
    "specifics": "Key names, dates, or details mentioned"
  }}
]"""


def template_enrichment_prompt(niche: str, title: str, structure: str) -> str:
    return f"""For a {niche} YouTube channel, create compelling content for this template:

Template Title: "{title}"
Structure: {structure or 'Standard structure'}

1. format: a specific production style that fits {niche} content
   (e.g. "Screen recording tutorial with voiceover", "Investigative documentary with timeline graphics",
   "List-style countdown with visual examples")
2. hook: a gripping 15-second opening line specific to {niche}

Return ONLY valid JSON: {{ "format": "...", "hook": "..." }}"""


def equipment_enrichment_prompt(niche: str, item: str) -> str:
    return f"""For a {niche} YouTube channel, explain why "{item}" is needed.

Be specific to {niche} content, for example:
- Microphone for "True Crime Stories": "To narrate investigations and create immersive documentary storytelling"
- Lighting for "Product Reviews": "To keep products well-lit and visible for detailed examination"

Answer in ONE sentence (10-20 words). Return ONLY the purpose text, no quotes."""


def _events_section(events: Sequence[Event]) -> str:
    if not events:
        return ""
    lines = [
        f"- {event.title} ({event.date}): {event.description}"
        + (f" [Entities: {', '.join(event.entities)}]" if event.entities else "")
        for event in events
    ]
    return (
        "\nREAL RECENT EVENTS in this niche (base content ideas on these, citing specific names and dates):\n"
        + "\n".join(lines)
        + "\n"
    )


def _analytics_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return _json_block(value)


def plan_prompt(
    *,
    channel_name: str,
    topic: str,
    niche: NicheProfile,
    events: Sequence[Event],
    channel_analytics: str = "",
    remix_analytics: Any = None,
    extra_channel_analytics: Any = None,
    now: Optional[datetime] = None,
) -> str:
    year = (now or datetime.now(timezone.utc)).year
    context_blocks = [block for block in (
        channel_analytics.strip(),
        _analytics_text(extra_channel_analytics),
        ("Remix analytics:\n" + _analytics_text(remix_analytics)) if remix_analytics else "",
    ) if block]
    context = "\n\n".join(context_blocks)

    return f"""Create a detailed 30-day action plan for a YouTube channel named "{channel_name}" to capitalize on the topic "{topic}".
{context}

Detected niche: {niche.niche} (category: {niche.broad_category}; tags: {', '.join(niche.sub_categories) or 'none'})
{_events_section(events)}
IMPORTANT: Tailor ALL content ideas, strategies and recommendations to this channel's niche and topic.
Do not default to technology content unless the topic is about technology.

Return ONLY a JSON object with exactly this structure:
{{
  "strategy": "Strategy name (e.g. 'Rapid Growth Strategy')",
  "timeline": "30 Days",
  "estimatedResults": {{"views": "50K-100K", "subscribers": "+500-1K", "revenue": "$500-1K"}},
  "weeklyPlan": [
    {{"week": 1, "theme": "Week theme", "tasks": [{{"id": "w1t1", "task": "Specific task", "priority": "high/medium/low"}}]}}
  ],
  "contentTemplates": [
    {{"type": "Video type", "title": "Title template with [placeholder]", "format": "Production style",
      "hook": "15-second opening line", "structure": "Hook -> Section1 -> Section2 -> CTA", "duration": "8-12 minutes"}}
  ],
  "keywords": ["keyword1", "keyword2"],
  "equipment": [{{"item": "Equipment name", "purpose": "Why it is needed", "essential": true, "budget": "Price range"}}],
  "successMetrics": {{
    "week1": {{"views": "10K", "subscribers": "+100", "engagement": "5%"}},
    "week2": {{"views": "25K", "subscribers": "+250", "engagement": "6%"}},
    "week3": {{"views": "50K", "subscribers": "+500", "engagement": "7%"}},
    "week4": {{"views": "100K", "subscribers": "+1K", "engagement": "8%"}}
  }},
  "contentIdeas": [{{"title": "Specific video title", "hook": "Opening hook", "description": "Brief description", "estimatedViews": "View potential"}}],
  "competitorAnalysis": {{"topChannels": ["Channel"], "successFactors": ["Factor"], "gaps": ["Opportunity"]}},
  "monetizationStrategy": [{{"method": "Method", "timeline": "When", "potential": "Revenue potential"}}]
}}

Structural requirements:
- weeklyPlan: exactly {WEEKS_PER_PLAN} weeks, each with exactly {TASKS_PER_WEEK} tasks
- contentTemplates: exactly {TEMPLATES_PER_PLAN} templates
- keywords: 6-8 relevant keywords
- equipment: exactly {EQUIPMENT_PER_PLAN} items
- contentIdeas: exactly 5 specific ideas
- monetizationStrategy: 3-4 methods

Make the plan specific, actionable and realistic, using YouTube growth practices that work in {year}."""
