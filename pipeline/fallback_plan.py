"""Static action plan used whenever generation cannot produce a valid one."""

from __future__ import annotations

from typing import List, Optional

from core import ActionPlan, ContentIdea
from core.plan import (
    CompetitorAnalysis,
    ContentTemplate,
    EquipmentItem,
    EstimatedResults,
    MonetizationMethod,
    PlanTask,
    SuccessMetrics,
    WeekMetrics,
    WeekPlan,
)


_WEEKS = [
    ("Research & Planning", [
        ("Research top performing videos in the niche", "high"),
        ("Create a content calendar", "high"),
        ("Set up analytics tracking", "medium"),
        ("Design channel branding", "medium"),
        ("Write initial video scripts", "high"),
    ]),
    ("Content Creation", [
        ("Record the first batch of videos", "high"),
        ("Edit videos with engaging hooks", "high"),
        ("Create eye-catching thumbnails", "high"),
        ("Write SEO-optimized descriptions", "medium"),
        ("Schedule uploads for optimal times", "medium"),
    ]),
    ("Launch & Promotion", [
        ("Publish videos consistently", "high"),
        ("Share on social media platforms", "medium"),
        ("Engage with viewer comments", "high"),
        ("Reach out for collaborations", "medium"),
        ("Join relevant communities", "low"),
    ]),
    ("Optimize & Scale", [
        ("Analyze video performance metrics", "high"),
        ("A/B test different thumbnails", "medium"),
        ("Double down on successful content", "high"),
        ("Build an email list", "medium"),
        ("Plan next month's content", "high"),
    ]),
]

_TEMPLATES = [
    (
        "Educational",
        "Complete Guide to [Topic]",
        "Direct-to-camera explainer with on-screen text overlays",
        "Most people get [Topic] wrong. Here is what actually works.",
        "Hook -> Overview -> Deep Dive -> Examples -> Summary",
        "10-15 minutes",
    ),
    (
        "Review",
        "Honest Review of [Product/Service]",
        "Hands-on review with close-up demonstration shots",
        "I used [Product] for 30 days so you don't have to.",
        "Hook -> First Impressions -> Testing -> Pros/Cons -> Verdict",
        "8-12 minutes",
    ),
    (
        "Tutorial",
        "How to [Achieve Result] - Step by Step",
        "Screen recording tutorial with voiceover",
        "By the end of this video you will be able to [Result].",
        "Problem -> Solution -> Steps -> Tips -> Results",
        "5-10 minutes",
    ),
]

_EQUIPMENT = [
    ("Microphone", "Clear voice audio for narration and talking-head segments", True, "$50-150"),
    ("Camera/Webcam", "Sharp on-camera footage for intros, reactions and demonstrations", True, "$100-500"),
    ("Lighting", "Even, flattering light so every shot looks professional", False, "$30-100"),
    ("Editing Software", "Cutting, pacing and captioning videos for retention", True, "$0-30/mo"),
    ("Thumbnail Tool", "Designing click-worthy thumbnails and channel art", True, "$0-15/mo"),
]

_METRICS = [
    ("1K", "+20", "5%"),
    ("5K", "+50", "6%"),
    ("15K", "+150", "7%"),
    ("30K", "+300", "8%"),
]


def _ideas(topic: str) -> List[ContentIdea]:
    return [
        ContentIdea(
            title=f"{topic}: The Complete Beginner's Guide",
            hook=f"Everything you need to know about {topic} in one video.",
            description=f"A structured introduction to {topic} for new viewers.",
            estimated_views="5K-15K",
        ),
        ContentIdea(
            title=f"5 {topic} Mistakes Everyone Makes",
            hook="You are probably making at least one of these right now.",
            description=f"Common pitfalls in {topic} and how to avoid them.",
            estimated_views="10K-25K",
        ),
        ContentIdea(
            title=f"I Tried {topic} for 30 Days",
            hook="Here is what actually happened.",
            description=f"A personal experiment documenting real results with {topic}.",
            estimated_views="10K-30K",
        ),
        ContentIdea(
            title=f"The Biggest {topic} Stories This Year",
            hook="These stories changed everything in this space.",
            description=f"A roundup of the most talked-about {topic} moments.",
            estimated_views="8K-20K",
        ),
        ContentIdea(
            title=f"{topic} Tools and Resources Ranked",
            hook="Only one of these is actually worth your time.",
            description=f"A ranked comparison of the most useful {topic} resources.",
            estimated_views="5K-12K",
        ),
    ]


def build_fallback_plan(channel_name: str, topic: str, niche: Optional[str] = None) -> ActionPlan:
    """Deterministic, fully populated plan; equal inputs yield equal plans."""
    channel_name = str(channel_name or "").strip() or "Your Channel"
    topic = str(topic or "").strip() or "Your Topic"

    weekly_plan = [
        WeekPlan(
            week=week_no,
            theme=theme,
            tasks=[
                PlanTask(id=f"w{week_no}t{task_no}", task=task, priority=priority)
                for task_no, (task, priority) in enumerate(tasks, 1)
            ],
        )
        for week_no, (theme, tasks) in enumerate(_WEEKS, 1)
    ]
    templates = [
        ContentTemplate(type=kind, title=title, format=fmt, hook=hook, structure=structure, duration=duration)
        for kind, title, fmt, hook, structure, duration in _TEMPLATES
    ]
    equipment = [
        EquipmentItem(item=item, purpose=purpose, essential=essential, budget=budget)
        for item, purpose, essential, budget in _EQUIPMENT
    ]
    metrics = SuccessMetrics(
        **{
            f"week{idx}": WeekMetrics(views=views, subscribers=subs, engagement=engagement)
            for idx, (views, subs, engagement) in enumerate(_METRICS, 1)
        }
    )

    keywords = [topic, channel_name]
    if niche and niche not in keywords:
        keywords.append(niche)
    keywords.extend(["guide", "tutorial", "review", "tips"])

    return ActionPlan(
        strategy="Growth Strategy",
        timeline="30 Days",
        estimated_results=EstimatedResults(views="10K-50K", subscribers="+100-500", revenue="$100-500"),
        weekly_plan=weekly_plan,
        content_templates=templates,
        keywords=keywords,
        equipment=equipment,
        success_metrics=metrics,
        content_ideas=_ideas(topic),
        competitor_analysis=CompetitorAnalysis(
            top_channels=[f"Leading {topic} channels"],
            success_factors=["Consistent upload schedule", "Strong hooks in the first 15 seconds"],
            gaps=["Beginner-friendly explainers", "Data-backed breakdowns of recent events"],
        ),
        monetization_strategy=[
            MonetizationMethod(method="YouTube Partner Program", timeline="After 1K subscribers", potential="$100-500/mo"),
            MonetizationMethod(method="Affiliate links for recommended tools", timeline="Week 2", potential="$50-300/mo"),
            MonetizationMethod(method="Sponsored segments", timeline="Month 2-3", potential="$200-1K per video"),
        ],
        channel=channel_name,
        topic=topic,
    )
