"""
Chart image generation with Matplotlib and Seaborn.
Draws adapted series (names + values) as base64 PNG images.
Uses the headless Agg backend.
"""
import io
import base64
import logging
import itertools
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
from django.conf import settings

logger = logging.getLogger(__name__)


class ChartGenerator:
    """
    Central chart generator.
    Series order is kept exactly as given; the adapter owns ordering.
    """

    FRIENDLY_PALETTE = [
        '#6366f1', '#10b981', '#f59e0b', '#ec4899', '#8b5cf6', '#06b6d4',
        '#f43f5e', '#84cc16', '#3b82f6', '#f97316', '#14b8a6', '#d946ef',
        '#64748b', '#ef4444', '#22c55e', '#eab308', '#a855f7', '#0ea5e9',
        '#f472b6', '#a3e635'
    ]

    THEME_COLORS = {
        'light': {
            'text': '#374151',
            'grid': '#9ca3af',
            'primary': '#6366f1',
            'edge_contrast': '#ffffff',
        },
        'dark': {
            'text': '#f3f4f6',
            'grid': '#4b5563',
            'primary': '#818cf8',
            'edge_contrast': '#161b22',
        }
    }

    BASE_STYLE = {
        'font.family': 'sans-serif',
        'font.sans-serif': ['Inter', 'system-ui', 'Segoe UI', 'DejaVu Sans', 'sans-serif'],
        'font.size': 12,
        'axes.labelsize': 12,
        'axes.titlesize': 14,
        'xtick.labelsize': 11,
        'ytick.labelsize': 11,
        'axes.unicode_minus': False,
        'axes.linewidth': 0,
    }

    @classmethod
    def _apply_style(cls, dark_mode=False):
        theme = cls.THEME_COLORS['dark'] if dark_mode else cls.THEME_COLORS['light']
        plt.style.use('default')
        params = {
            **cls.BASE_STYLE,
            'text.color': theme['text'],
            'axes.labelcolor': theme['text'],
            'xtick.color': theme['text'],
            'ytick.color': theme['text'],
            'axes.facecolor': 'none',
            'figure.facecolor': 'none',
            'savefig.facecolor': 'none',
            'savefig.transparent': True,
            'axes.edgecolor': 'none',
            'grid.color': theme['grid'],
            'grid.linestyle': ':',
            'grid.linewidth': 1.0,
            'grid.alpha': 0.4,
        }
        plt.rcParams.update(params)
        sns.set_style(
            "whitegrid",
            {
                "axes.facecolor": "none",
                "figure.facecolor": "none",
                "grid.color": theme['grid'],
                "text.color": theme['text'],
                "axes.labelcolor": theme['text'],
                "xtick.color": theme['text'],
                "ytick.color": theme['text'],
            },
        )
        return theme

    @classmethod
    def _setup_figure(cls, figsize=(7, 4), dark_mode=False):
        theme = cls._apply_style(dark_mode)
        fig, ax = plt.subplots(figsize=figsize, facecolor='none')
        ax.set_facecolor('none')
        return fig, ax, theme

    @staticmethod
    def _get_colors(n_colors):
        return list(itertools.islice(itertools.cycle(ChartGenerator.FRIENDLY_PALETTE), n_colors))

    @staticmethod
    def _fig_to_base64(fig, dpi=None):
        try:
            buf = io.BytesIO()
            fig.savefig(
                buf,
                format="png",
                dpi=dpi or settings.CHART_DPI,
                bbox_inches='tight',
                pad_inches=0.1,
                transparent=True,
            )
            buf.seek(0)
            return base64.b64encode(buf.read()).decode("utf-8")
        except Exception as e:
            logger.error(f"Error saving chart image: {e}")
            return None
        finally:
            plt.close(fig)

    @staticmethod
    def _short_labels(labels, width):
        return [str(l)[:width] for l in labels]

    @classmethod
    def _style_axes(cls, ax, theme, title, x_label, y_label):
        if title:
            ax.set_title(title, fontsize=15, weight='bold', pad=20, color=theme['text'])
        if x_label:
            ax.set_xlabel(x_label, color=theme['text'])
        if y_label:
            ax.set_ylabel(y_label, color=theme['text'])

        ax.spines['top'].set_visible(False)
        ax.spines['right'].set_visible(False)
        ax.spines['left'].set_visible(False)
        ax.spines['bottom'].set_color(theme['grid'])
        ax.grid(axis='y', linestyle='--', alpha=0.4, color=theme['grid'], zorder=0)
        ax.grid(axis='x', visible=False)

    # ==========================
    # CHART TYPES
    # ==========================

    @classmethod
    def generate_bar_chart(
        cls, labels, values, title=None, x_label=None, y_label=None, dark_mode=False
    ):
        if not labels:
            return None

        fig_width = max(8, len(labels) * 1.2)
        fig, ax, theme = cls._setup_figure(figsize=(fig_width, 6.0), dark_mode=dark_mode)

        try:
            bars = ax.bar(
                range(len(labels)),
                values,
                color=cls._get_colors(len(labels)),
                alpha=0.95,
                width=0.7,
                zorder=3,
            )
            ax.set_xticks(range(len(labels)))
            ax.set_xticklabels(cls._short_labels(labels, 15), rotation=30, ha='right')
            ax.tick_params(axis='x', colors=theme['text'], length=0, labelsize=11)
            cls._style_axes(ax, theme, title, x_label, y_label)
            ax.bar_label(bars, fmt='%g', padding=4, fontsize=12, weight='bold', color=theme['text'])
            fig.tight_layout()
        except Exception as e:
            logger.error(f"Bar chart error: {e}")
            plt.close(fig)
            return None
        return cls._fig_to_base64(fig)

    @classmethod
    def generate_donut_chart(cls, labels, values, title=None, hole=0.50, dark_mode=False):
        """Pie chart; ``hole`` > 0 draws it as a doughnut."""
        if not labels or sum(v for v in values if v > 0) <= 0:
            return None

        fig, ax, theme = cls._setup_figure(figsize=(7, 5.5), dark_mode=dark_mode)

        try:
            wedges, _texts, _autotexts = ax.pie(
                values,
                labels=None,
                autopct='%1.0f%%',
                startangle=90,
                counterclock=False,
                colors=cls._get_colors(len(labels)),
                pctdistance=0.78 if hole else 0.6,
                wedgeprops={'linewidth': 0},
                textprops=dict(color='#ffffff', fontsize=11, weight='bold'),
            )
            if hole:
                ax.add_artist(plt.Circle((0, 0), hole, fc=theme['edge_contrast'], linewidth=0))

            ax.legend(
                wedges,
                cls._short_labels(labels, 40),
                loc="center left",
                bbox_to_anchor=(1, 0, 0.5, 1),
                frameon=False,
                fontsize=11,
            )
            ax.axis('equal')
            if title:
                ax.set_title(title, fontsize=14, weight='bold', pad=15, color=theme['text'])
        except Exception as e:
            logger.error(f"Pie chart error: {e}")
            plt.close(fig)
            return None
        return cls._fig_to_base64(fig)

    @classmethod
    def generate_pie_chart(cls, labels, values, title=None, dark_mode=False):
        return cls.generate_donut_chart(labels, values, title, hole=0, dark_mode=dark_mode)

    @classmethod
    def generate_line_chart(
        cls, labels, values, title=None, x_label=None, y_label=None, fill=False, dark_mode=False
    ):
        """Line chart; ``fill`` shades the area under the line."""
        if not labels:
            return None

        fig_width = max(8, len(labels) * 1.0)
        fig, ax, theme = cls._setup_figure(figsize=(fig_width, 5.5), dark_mode=dark_mode)

        try:
            x = list(range(len(labels)))
            ax.plot(x, values, color=theme['primary'], linewidth=2.5, marker='o', markersize=7, zorder=3)
            if fill:
                ax.fill_between(x, values, color=theme['primary'], alpha=0.2, zorder=2)
            ax.set_xticks(x)
            ax.set_xticklabels(cls._short_labels(labels, 15), rotation=30, ha='right')
            ax.tick_params(axis='x', colors=theme['text'], length=0, labelsize=11)
            cls._style_axes(ax, theme, title, x_label, y_label)
            fig.tight_layout()
        except Exception as e:
            logger.error(f"Line chart error: {e}")
            plt.close(fig)
            return None
        return cls._fig_to_base64(fig)
